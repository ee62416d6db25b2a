"""Sources of uniformly random field elements."""
from __future__ import annotations

import secrets
from typing import Protocol, runtime_checkable


@runtime_checkable
class FieldRandom(Protocol):
    """Anything able to draw an integer uniformly from ``[0, bound)``."""

    def next_field_element(self, exclusive_upper_bound: int) -> int:
        ...


class SecureFieldRandom:
    """Default source backed by the operating system CSPRNG.

    :func:`secrets.randbelow` keeps no per-instance state, so a single instance
    can be shared between threads.
    """

    def next_field_element(self, exclusive_upper_bound: int) -> int:
        return secrets.randbelow(exclusive_upper_bound)

    def __repr__(self) -> str:
        return "SecureFieldRandom()"


__all__ = ["FieldRandom", "SecureFieldRandom"]
