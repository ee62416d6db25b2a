"""Shamir's secret sharing over the prime field GF(257).

Typical usage::

    from shamir257 import combine, split

    shares = split(b"launch code", share_count=5, threshold=3)
    assert combine(shares[1:4]) == b"launch code"

Shares travel between processes as one JSON object per line, see
:func:`serialize_share` and :func:`deserialize_share`.
"""

from __future__ import annotations

import logging

from .codec import deserialize_many_shares, deserialize_share, serialize_share
from .errors import (
    FieldDivisionError,
    ShamirArgumentError,
    ShamirError,
    ShamirReconstructionError,
    ShamirValidationError,
)
from .randomness import FieldRandom, SecureFieldRandom
from .share import CURRENT_PRIME, CURRENT_VERSION, Share
from .sharer import combine, split

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "split",
    "combine",
    "serialize_share",
    "deserialize_share",
    "deserialize_many_shares",
    "Share",
    "FieldRandom",
    "SecureFieldRandom",
    "CURRENT_VERSION",
    "CURRENT_PRIME",
    "ShamirError",
    "ShamirArgumentError",
    "FieldDivisionError",
    "ShamirValidationError",
    "ShamirReconstructionError",
]
