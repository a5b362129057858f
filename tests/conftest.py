"""Pytest configuration: ensure env vars and import path are set early.

This runs before any tests, so modules can import without local path hacks.
"""
from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

# Keep test logs and uploads out of the working tree
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="yang-browser-tests-"))
os.environ.setdefault("YANG_BROWSER_LOG_DIR", str(_TEST_ROOT / "logs"))
os.environ.setdefault("UPLOADS_DIR", str(_TEST_ROOT / "uploads"))
