# SPDX-FileCopyrightText: 2025 shamir257 contributors
# SPDX-License-Identifier: MIT
#
# conftest.py: test environment
#   • src/ on sys.path so the suite runs without an editable install
#   • audit trail disabled unless a test opts in

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if SRC.is_dir():
    sys.path.insert(0, str(SRC))  # чтобы import видел src/

os.environ.pop("SHAMIR257_AUDIT_DIR", None)
