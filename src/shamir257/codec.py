"""JSON text form of a :class:`~shamir257.share.Share`.

A share is written as one compact JSON object per line::

    {"version":1,"prime":257,"threshold":3,"x":1,"yValues":[8,15],"secretLength":2}

Reading is done in two steps: the text is parsed into a plain dict whose keys
are matched case-insensitively against the known field names, then the values
go through :class:`Share` construction. Each step reports failures as
:class:`ShamirValidationError` with the underlying exception chained.

The reader is stricter than a lenient JSON binding on purpose: unknown fields are
rejected and missing fields are reported as mapping errors rather than being
defaulted to zero, since a share has exactly six fields.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List

from .errors import ShamirArgumentError, ShamirValidationError
from .share import Share

# Wire name -> Share attribute, in the order the writer emits them.
_FIELDS = (
    ("version", "version"),
    ("prime", "prime"),
    ("threshold", "threshold"),
    ("x", "x"),
    ("yValues", "y_values"),
    ("secretLength", "secret_length"),
)
_ATTRIBUTE_BY_KEY = {wire.lower(): attribute for wire, attribute in _FIELDS}


def serialize_share(share: Share) -> str:
    if share is None:
        raise ShamirArgumentError("share must not be None.")
    payload = {wire: getattr(share, attribute) for wire, attribute in _FIELDS}
    payload["yValues"] = list(share.y_values)
    return json.dumps(payload, separators=(",", ":"))


def _map_fields(document: Any) -> Dict[str, Any]:
    if not isinstance(document, dict):
        raise ShamirValidationError(
            "Share JSON could not be mapped to a valid share model: expected an object."
        )

    mapped: Dict[str, Any] = {}
    for key, value in document.items():
        attribute = _ATTRIBUTE_BY_KEY.get(key.lower())
        if attribute is None:
            raise ShamirValidationError(
                f"Share JSON could not be mapped to a valid share model: unknown field {key!r}."
            )
        mapped[attribute] = value

    missing = [wire for wire, attribute in _FIELDS if attribute not in mapped]
    if missing:
        raise ShamirValidationError(
            "Share JSON could not be mapped to a valid share model: missing field(s) "
            + ", ".join(missing)
            + "."
        )
    if not isinstance(mapped["y_values"], list):
        raise ShamirValidationError(
            "Share JSON could not be mapped to a valid share model: yValues must be an array."
        )
    return mapped


def _reject_duplicate_keys(pairs):
    # json.loads keeps only the last of repeated keys; surface them instead.
    seen = set()
    for key, _ in pairs:
        folded = key.lower()
        if folded in seen:
            raise ShamirValidationError(
                f"Share JSON could not be mapped to a valid share model: duplicate field {key!r}."
            )
        seen.add(folded)
    return dict(pairs)


def deserialize_share(text: str) -> Share:
    """Parse one JSON share; every failure is a :class:`ShamirValidationError`."""
    if text is None or not str(text).strip():
        raise ShamirValidationError("Share JSON input must not be empty.")

    try:
        document = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as exc:
        raise ShamirValidationError(f"Share JSON could not be parsed: {exc.msg}.") from exc
    except (ValueError, RecursionError) as exc:
        # Oversized integer literals and runaway nesting fail outside the decoder's own errors.
        raise ShamirValidationError(f"Share JSON could not be parsed: {exc}.") from exc

    mapped = _map_fields(document)
    try:
        return Share(**mapped)
    except ShamirArgumentError as exc:
        raise ShamirValidationError(f"Share JSON contains invalid share values: {exc}") from exc


def deserialize_many_shares(lines: Iterable[str]) -> List[Share]:
    """Parse one share per non-blank line, stopping at the first bad line."""
    if lines is None:
        raise ShamirArgumentError("lines must not be None.")

    shares: List[Share] = []
    for line in lines:
        if line is None or not line.strip():
            continue
        shares.append(deserialize_share(line))

    if not shares:
        raise ShamirValidationError("No share JSON entries were provided.")
    return shares


__all__ = ["serialize_share", "deserialize_share", "deserialize_many_shares"]
