# src/logging/handlers.py - v2
"""Rotating file handler for the trigger log.

Every invocation appends to the same log, so rotation keeps it bounded.
"""

from __future__ import annotations

import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_LOG_FILENAME = "mass_spec_trigger_log_file.txt"

_SIZE_PATTERN = re.compile(r"^(\d+)\s*(B|KB|MB|GB)?$", re.IGNORECASE)
_MULTIPLIERS = {"B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}


def parse_size(size_str: str) -> int:
    """Parse a size string like '10MB' (or a bare byte count) into bytes."""
    match = _SIZE_PATTERN.match(size_str.strip())
    if not match:
        raise ValueError(f"Invalid size format: {size_str!r}. Use e.g. '10MB'.")
    unit = (match.group(2) or "B").upper()
    return int(match.group(1)) * _MULTIPLIERS[unit]


def resolve_log_path(log_file: str) -> Path:
    """Expand ``~`` and treat an existing directory as the log folder."""
    path = Path(log_file).expanduser()
    if path.is_dir():
        path = path / DEFAULT_LOG_FILENAME
    return path


def create_rotating_handler(
    log_file: str,
    rotation: str = "10MB",
    retention: int = 30,
) -> RotatingFileHandler:
    """Create an appending rotating file handler.

    Args:
        log_file: Path to log file, or a directory to hold the default log name.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of backup files to keep.

    Returns:
        Configured RotatingFileHandler.
    """
    path = resolve_log_path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    return RotatingFileHandler(
        filename=str(path),
        mode="a",
        maxBytes=parse_size(rotation),
        backupCount=retention,
        encoding="utf-8",
    )
