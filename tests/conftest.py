"""Deterministic randomness doubles shared by the test modules."""
from __future__ import annotations

from typing import List

import pytest


class SequenceFieldRandom:
    """Replays *values* in order, cycling when exhausted."""

    def __init__(self, *values: int) -> None:
        if not values:
            raise ValueError("at least one value is required")
        self._values = list(values)
        self._index = 0
        self.requested_bounds: List[int] = []

    def next_field_element(self, exclusive_upper_bound: int) -> int:
        self.requested_bounds.append(exclusive_upper_bound)
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value

    @property
    def draws(self) -> int:
        return self._index


@pytest.fixture
def sequence_random():
    """Factory fixture: ``sequence_random(1, 2)`` replays 1, 2, 1, 2, ..."""

    return SequenceFieldRandom
