"""Environment-driven settings.

Variables:
    ARCHBASE_LOG_LEVEL      — log level (default: INFO)
    ARCHBASE_LOG_FORMAT     — console | json (default: console)
    ARCHBASE_TEMPLATES_DIR  — extra template directory searched before the bundled one
    ARCHBASE_SCAN_WORKERS   — default worker count for directory scans (default: 1)
"""

from __future__ import annotations

import os
from pathlib import Path

BUNDLED_TEMPLATES_DIR = Path(__file__).parent / "generators" / "templates"


def log_level() -> str:
    return os.environ.get("ARCHBASE_LOG_LEVEL", "INFO").upper()


def log_format() -> str:
    return os.environ.get("ARCHBASE_LOG_FORMAT", "console").lower()


def template_dirs() -> list[Path]:
    """Template search path, user override first."""
    dirs: list[Path] = []
    override = os.environ.get("ARCHBASE_TEMPLATES_DIR")
    if override:
        dirs.append(Path(override))
    dirs.append(BUNDLED_TEMPLATES_DIR)
    return dirs


def scan_workers() -> int:
    raw = os.environ.get("ARCHBASE_SCAN_WORKERS", "1")
    try:
        return max(1, int(raw))
    except ValueError:
        return 1
