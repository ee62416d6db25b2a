"""Splitting secrets into shares and combining shares back into secrets.

:func:`split` builds one random polynomial per secret byte, with the byte as
constant term, and evaluates it at ``x = 1..share_count``. :func:`combine`
validates a share collection, picks ``threshold`` shares by ascending ``x``
and recovers each byte by Lagrange interpolation at zero.

Neither function keeps state between calls; randomness comes exclusively from
the :class:`~shamir257.randomness.FieldRandom` passed to :func:`split`.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Union

from . import gf257
from .errors import ShamirArgumentError, ShamirReconstructionError, ShamirValidationError
from .randomness import FieldRandom, SecureFieldRandom
from .share import CURRENT_PRIME, CURRENT_VERSION, Share

_logger = logging.getLogger(__name__)

MIN_SHARES = 2
MAX_SHARES = gf257.PRIME - 1
MIN_THRESHOLD = 2

SecretLike = Union[bytes, bytearray, memoryview, Sequence[int]]


def _coerce_secret(secret: SecretLike) -> bytes:
    if secret is None:
        raise ShamirArgumentError("secret must not be None.")
    if isinstance(secret, (int, str)):
        raise ShamirArgumentError(
            f"secret must be a byte sequence, got {type(secret).__name__}."
        )
    try:
        data = bytes(secret)
    except (TypeError, ValueError) as exc:
        raise ShamirArgumentError("secret must contain only byte values 0..255.") from exc
    if not data:
        raise ShamirArgumentError("Secret must not be empty.")
    return data


def _require_count(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ShamirArgumentError(f"{name} must be an integer, got {type(value).__name__}.")
    return value


def split(
    secret: SecretLike,
    share_count: int,
    threshold: int,
    random: Optional[FieldRandom] = None,
) -> List[Share]:
    """Split *secret* into *share_count* shares, any *threshold* of which recover it.

    Returns shares ordered by ``x = 1..share_count``. Raises
    :class:`ShamirArgumentError` for an empty secret, a share count outside
    ``[2, 256]`` or a threshold outside ``[2, share_count]``.
    """
    data = _coerce_secret(secret)
    share_count = _require_count("share_count", share_count)
    threshold = _require_count("threshold", threshold)

    if share_count < MIN_SHARES or share_count > MAX_SHARES:
        raise ShamirArgumentError(
            f"Share count must be between {MIN_SHARES} and {MAX_SHARES}, got {share_count}."
        )
    if threshold < MIN_THRESHOLD or threshold > share_count:
        raise ShamirArgumentError(
            f"Threshold must be between {MIN_THRESHOLD} and share count {share_count}, "
            f"got {threshold}."
        )

    source = random if random is not None else SecureFieldRandom()
    _logger.debug(
        "Splitting %d-byte secret into %d shares (threshold %d)",
        len(data),
        share_count,
        threshold,
    )

    share_values: List[List[int]] = [[] for _ in range(share_count)]
    coefficients = [0] * threshold
    for byte in data:
        coefficients[0] = byte
        for degree in range(1, threshold):
            coefficient = source.next_field_element(gf257.PRIME)
            if isinstance(coefficient, bool) or not isinstance(coefficient, int) or not (
                0 <= coefficient < gf257.PRIME
            ):
                raise ShamirValidationError(
                    f"Random coefficient {coefficient!r} is outside GF({gf257.PRIME})."
                )
            coefficients[degree] = coefficient

        for share_index in range(share_count):
            share_values[share_index].append(
                gf257.evaluate_polynomial(coefficients, share_index + 1)
            )

    return [
        Share(
            CURRENT_VERSION,
            CURRENT_PRIME,
            threshold,
            share_index + 1,
            tuple(values),
            len(data),
        )
        for share_index, values in enumerate(share_values)
    ]


def _validate_collection(shares: Sequence[Share], reference: Share) -> None:
    seen_x = set()
    for index, share in enumerate(shares):
        if share.x in seen_x:
            raise ShamirValidationError(
                f"Duplicate x value detected at index {index}: {share.x}."
            )
        seen_x.add(share.x)

        for name, expected in (
            ("version", reference.version),
            ("prime", reference.prime),
            ("threshold", reference.threshold),
            ("secret length", reference.secret_length),
        ):
            actual = getattr(share, name.replace(" ", "_"))
            if actual != expected:
                raise ShamirValidationError(
                    f"Share metadata mismatch at index {index}: {name} {actual} "
                    f"does not match {expected}."
                )

        if len(share.y_values) != reference.secret_length:
            raise ShamirValidationError(
                f"Share at index {index} has {len(share.y_values)} y-values, "
                f"expected {reference.secret_length}."
            )
        if share.x <= 0 or share.x >= reference.prime:
            raise ShamirValidationError(
                f"Share at index {index} has x={share.x}, which is outside the field."
            )
        for i, y in enumerate(share.y_values):
            if y >= reference.prime:
                raise ShamirValidationError(
                    f"Share at index {index} has y_values[{i}]={y}, which is outside the field."
                )


def combine(shares: Iterable[Share]) -> bytes:
    """Reconstruct the secret from at least ``threshold`` consistent shares.

    Surplus shares are ignored: the ``threshold`` shares with the smallest
    ``x`` are used. Raises :class:`ShamirValidationError` for inconsistent or
    insufficient shares and :class:`ShamirReconstructionError` when the
    interpolated values do not fit in a byte.
    """
    if shares is None:
        raise ShamirArgumentError("shares must not be None.")

    share_list: List[Share] = []
    for share in shares:
        if share is None:
            raise ShamirValidationError("Share collection contains a null share.")
        share_list.append(share)

    if not share_list:
        raise ShamirValidationError("At least one share is required.")

    reference = share_list[0]
    if reference.version != CURRENT_VERSION:
        raise ShamirValidationError(
            f"Unsupported share version {reference.version}. Expected {CURRENT_VERSION}."
        )
    if reference.prime != gf257.PRIME:
        raise ShamirValidationError(
            f"Unsupported prime {reference.prime}. Expected {gf257.PRIME}."
        )

    _validate_collection(share_list, reference)

    threshold = reference.threshold
    if len(share_list) < threshold:
        raise ShamirValidationError(
            f"Insufficient shares. Threshold is {threshold}, but only "
            f"{len(share_list)} share(s) were provided."
        )

    selected = sorted(share_list, key=lambda share: share.x)[:threshold]
    xs = [share.x for share in selected]
    _logger.debug(
        "Combining %d of %d shares into %d-byte secret",
        threshold,
        len(share_list),
        reference.secret_length,
    )

    secret = bytearray(reference.secret_length)
    for position in range(reference.secret_length):
        ys = [share.y_values[position] for share in selected]
        value = gf257.interpolate_at_zero(xs, ys)
        if value < 0 or value > 0xFF:
            raise ShamirReconstructionError(
                f"Reconstructed value {value} at byte index {position} is outside byte range."
            )
        secret[position] = value

    return bytes(secret)


__all__ = ["split", "combine", "MIN_SHARES", "MAX_SHARES", "MIN_THRESHOLD"]
