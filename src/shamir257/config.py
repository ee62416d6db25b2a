"""Runtime settings for the command-line front end.

Values are read from environment variables so that scripted deployments can
tune them without code changes. Unparseable values fall back to the defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _load_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _load_level(name: str, default: str) -> str:
    value = os.environ.get(name)
    if value is None:
        return default
    normalized = value.strip().upper()
    return normalized if normalized in _LOG_LEVELS else default


def _load_path(name: str) -> Optional[Path]:
    value = os.environ.get(name, "").strip()
    if not value:
        return None
    return Path(value).expanduser()


@dataclass(frozen=True)
class Settings:
    """Tunables shared by the CLI and the audit trail."""

    log_level: str = "WARNING"
    max_secret_kb: int = 64
    audit_dir: Optional[Path] = None

    @property
    def max_secret_bytes(self) -> int:
        return self.max_secret_kb * 1024

    @property
    def numeric_log_level(self) -> int:
        return getattr(logging, self.log_level)


def load_settings() -> Settings:
    """Load settings considering environment overrides."""

    return Settings(
        log_level=_load_level("SHAMIR257_LOG_LEVEL", "WARNING"),
        max_secret_kb=_load_int("SHAMIR257_MAX_SECRET_KB", 64),
        audit_dir=_load_path("SHAMIR257_AUDIT_DIR"),
    )


__all__ = ["Settings", "load_settings"]
