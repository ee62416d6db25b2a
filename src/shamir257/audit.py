"""Offline audit trail of CLI operations with Ed25519 signatures and hash chaining.

Only operation metadata is recorded (share count, threshold, secret length).
Secrets, coefficients and share values never reach the audit directory.

Each record is ``{"payload", "signature", "chain_hash"}``. The payload carries
the hash of the previous record (``GENESIS`` for the first one), so records
written to the same directory form a chain; ``chain.state`` holds its head.
Verification only reads the directory and never creates a signing key.
"""
from __future__ import annotations

import hashlib
import json
import os
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

KEY_FILENAME = "signing_key.pem"
CHAIN_STATE_FILENAME = "chain.state"
GENESIS = "GENESIS"


def _read_signing_key(audit_dir: Path) -> Optional[Ed25519PrivateKey]:
    key_path = audit_dir / KEY_FILENAME
    if not key_path.is_file():
        return None
    return serialization.load_pem_private_key(key_path.read_bytes(), password=None)


def _signing_key_for_writing(audit_dir: Path) -> Ed25519PrivateKey:
    existing = _read_signing_key(audit_dir)
    if existing is not None:
        return existing
    generated = Ed25519PrivateKey.generate()
    pem = generated.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    (audit_dir / KEY_FILENAME).write_bytes(pem)
    return generated


def _chain_head(audit_dir: Path) -> str:
    state = audit_dir / CHAIN_STATE_FILENAME
    if not state.is_file():
        return GENESIS
    return state.read_text().strip() or GENESIS


def _message(payload: Dict[str, Any]) -> bytes:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True).encode("utf-8")


def _link(message: bytes, signature: bytes) -> str:
    return hashlib.sha3_512(message + signature).hexdigest()


def _signed_entry(payload: Dict[str, Any], key: Ed25519PrivateKey) -> Dict[str, Any]:
    message = _message(payload)
    signature = key.sign(message)
    return {"payload": payload, "signature": signature.hex(), "chain_hash": _link(message, signature)}


def record_event(
    audit_dir: os.PathLike[str] | str,
    event: str,
    *,
    details: Dict[str, Any] | None = None,
) -> Path:
    """Append a signed record for *event* to *audit_dir* and return its path."""
    directory = Path(audit_dir)
    directory.mkdir(parents=True, exist_ok=True)

    created = int(time.time())
    entry = _signed_entry(
        {
            "event": event,
            "details": dict(details or {}),
            "timestamp": created,
            "prev_hash": _chain_head(directory),
        },
        _signing_key_for_writing(directory),
    )

    record_path = directory / f"audit_{created}_{uuid.uuid4().hex}.json"
    record_path.write_text(json.dumps(entry, ensure_ascii=False, indent=2))
    (directory / CHAIN_STATE_FILENAME).write_text(entry["chain_hash"])
    return record_path


def verify_log(path: os.PathLike[str] | str) -> bool:
    """Return True when the record at *path* matches its signature and chain hash.

    A record whose directory holds no signing key, or whose signature is not
    valid hex, does not verify.
    """
    record_path = Path(path)
    key = _read_signing_key(record_path.parent)
    if key is None:
        return False

    entry = json.loads(record_path.read_text())
    message = _message(entry["payload"])
    try:
        signature = bytes.fromhex(entry.get("signature") or "")
        key.public_key().verify(signature, message)
    except (ValueError, InvalidSignature):
        return False
    return _link(message, signature) == entry.get("chain_hash")


__all__ = ["record_event", "verify_log", "GENESIS"]
