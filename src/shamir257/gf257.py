"""Exact arithmetic in the prime field GF(257).

Every function accepts arbitrary integers, reduces them into ``[0, 256]``
first and returns a normalised field element. Secret bytes ``0..255`` are
all members of the field, which is why the modulus is 257 rather than 256.
"""
from __future__ import annotations

from typing import Sequence

from .errors import FieldDivisionError, ShamirArgumentError

PRIME = 257


def normalize(value: int) -> int:
    """Map *value* onto its representative in ``[0, PRIME - 1]``."""
    # Python's modulo takes the sign of the divisor, so negatives wrap upwards.
    return value % PRIME


def add(left: int, right: int) -> int:
    return normalize(normalize(left) + normalize(right))


def sub(left: int, right: int) -> int:
    return normalize(normalize(left) - normalize(right))


def mul(left: int, right: int) -> int:
    return (normalize(left) * normalize(right)) % PRIME


def power(value: int, exponent: int) -> int:
    """Raise *value* to a non-negative *exponent* by square-and-multiply."""
    if exponent < 0:
        raise ShamirArgumentError(f"exponent must be non-negative, got {exponent}.")

    result = 1
    factor = normalize(value)
    remaining = exponent
    while remaining > 0:
        if remaining & 1:
            result = mul(result, factor)
        factor = mul(factor, factor)
        remaining >>= 1
    return result


def inv(value: int) -> int:
    """Multiplicative inverse via Fermat's little theorem."""
    normalized = normalize(value)
    if normalized == 0:
        raise FieldDivisionError("Zero does not have a multiplicative inverse in GF(257).")
    return power(normalized, PRIME - 2)


def div(numerator: int, denominator: int) -> int:
    return mul(numerator, inv(denominator))


def evaluate_polynomial(coefficients: Sequence[int], x: int) -> int:
    """Evaluate a polynomial given low-to-high *coefficients* at *x* (Horner)."""
    if len(coefficients) == 0:
        raise ShamirArgumentError("At least one coefficient is required.")

    result = 0
    point = normalize(x)
    for coefficient in reversed(coefficients):
        result = add(mul(result, point), coefficient)
    return result


def interpolate_at_zero(xs: Sequence[int], ys: Sequence[int]) -> int:
    """Return the constant term of the lowest-degree polynomial through the points.

    Each Lagrange basis polynomial is evaluated at zero directly, so the full
    polynomial is never materialised. Coinciding x-values make a denominator
    vanish and surface as :class:`FieldDivisionError`.
    """
    if len(xs) != len(ys):
        raise ShamirArgumentError(
            f"xs and ys lengths must match ({len(xs)} != {len(ys)})."
        )
    if len(xs) == 0:
        raise ShamirArgumentError("At least one point is required.")

    result = 0
    for i, (xi_raw, yi) in enumerate(zip(xs, ys)):
        xi = normalize(xi_raw)
        numerator = 1
        denominator = 1
        for j, xj_raw in enumerate(xs):
            if i == j:
                continue
            xj = normalize(xj_raw)
            numerator = mul(numerator, sub(0, xj))
            denominator = mul(denominator, sub(xi, xj))
        basis_at_zero = div(numerator, denominator)
        result = add(result, mul(yi, basis_at_zero))
    return result


__all__ = [
    "PRIME",
    "normalize",
    "add",
    "sub",
    "mul",
    "power",
    "inv",
    "div",
    "evaluate_polynomial",
    "interpolate_at_zero",
]
