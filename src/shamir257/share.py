"""Immutable share record produced by :func:`shamir257.split`."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple

from .errors import ShamirArgumentError
from .gf257 import PRIME

CURRENT_VERSION = 1
CURRENT_PRIME = PRIME


def _require_int(name: str, value: object) -> int:
    # bool is an int subclass but never a meaningful share field.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ShamirArgumentError(f"{name} must be an integer, got {type(value).__name__}.")
    return value


@dataclass(frozen=True)
class Share:
    """One evaluation point of the secret polynomials plus scheme metadata.

    All invariants are enforced on construction, so any ``Share`` instance in
    circulation is internally consistent. ``y_values`` is copied into a tuple,
    which keeps the share unaffected by later changes to the caller's list.
    """

    version: int
    prime: int
    threshold: int
    x: int
    y_values: Tuple[int, ...] = field(repr=False)
    secret_length: int

    def __post_init__(self) -> None:
        version = _require_int("version", self.version)
        prime = _require_int("prime", self.prime)
        threshold = _require_int("threshold", self.threshold)
        x = _require_int("x", self.x)
        secret_length = _require_int("secret_length", self.secret_length)

        if version <= 0:
            raise ShamirArgumentError(f"version must be greater than zero, got {version}.")
        if prime <= 2:
            raise ShamirArgumentError(f"prime must be greater than 2, got {prime}.")
        if threshold < 2 or threshold >= prime:
            raise ShamirArgumentError(
                f"threshold must be at least 2 and less than the prime, got {threshold}."
            )
        if x <= 0 or x >= prime:
            raise ShamirArgumentError(f"x must be between 1 and prime - 1, got {x}.")
        if secret_length <= 0:
            raise ShamirArgumentError(
                f"secret_length must be greater than zero, got {secret_length}."
            )
        if self.y_values is None:
            raise ShamirArgumentError("y_values must not be None.")

        try:
            y_values = tuple(self.y_values)
        except TypeError as exc:
            raise ShamirArgumentError("y_values must be a sequence of integers.") from exc
        if len(y_values) != secret_length:
            raise ShamirArgumentError(
                f"y_values length {len(y_values)} must match secret_length {secret_length}."
            )
        for i, y in enumerate(y_values):
            _require_int(f"y_values[{i}]", y)
            if y < 0 or y >= prime:
                raise ShamirArgumentError(f"y_values[{i}]={y} must be in [0, {prime}).")

        object.__setattr__(self, "y_values", y_values)

    @classmethod
    def create(
        cls,
        threshold: int,
        x: int,
        y_values: Iterable[int],
        secret_length: int,
    ) -> "Share":
        """Build a share stamped with the current format version and prime."""
        return cls(CURRENT_VERSION, CURRENT_PRIME, threshold, x, tuple(y_values), secret_length)


__all__ = ["Share", "CURRENT_VERSION", "CURRENT_PRIME"]
