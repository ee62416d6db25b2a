"""Exception hierarchy shared by the field engine, the sharer and the codec."""
from __future__ import annotations


class ShamirError(Exception):
    """Base class for every error raised by :mod:`shamir257`."""


class ShamirArgumentError(ShamirError, ValueError):
    """Raised when a caller-supplied argument has the wrong shape or range."""


class FieldDivisionError(ShamirArgumentError, ZeroDivisionError):
    """Raised when inverting or dividing by an element that is zero in GF(257)."""


class ShamirValidationError(ShamirError):
    """Raised when shares are well-formed but violate a domain invariant."""


class ShamirReconstructionError(ShamirError):
    """Raised when interpolation yields a value outside the byte range."""


__all__ = [
    "ShamirError",
    "ShamirArgumentError",
    "FieldDivisionError",
    "ShamirValidationError",
    "ShamirReconstructionError",
]
