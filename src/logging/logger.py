# src/logging/logger.py - v3
"""JSON and text formatters plus setup of the ``msatrigger`` logger tree.

Records go to stderr so stdout stays free for callers that capture it.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from typing import Any

from msatrigger.logging.context import get_context
from msatrigger.logging.handlers import create_rotating_handler

ROOT_LOGGER_NAME = "msatrigger"


class JsonFormatter(logging.Formatter):
    """Structured JSON log formatter, one object per line."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now().astimezone().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context_dict = ctx.as_dict()
        if context_dict:
            log_entry["context"] = context_dict

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter, local time like the marker files."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        parts = [
            f"[ {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} ]",
            f"[{record.levelname:8s}]",
            record.name,
        ]
        if ctx.step:
            parts.append(f"({ctx.step})")
        parts.append(f"- {record.getMessage()}")
        line = " ".join(parts)
        if record.exc_info and record.exc_info[1] is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


_FORMATTERS: dict[str, type[logging.Formatter]] = {
    "json": JsonFormatter,
    "text": TextFormatter,
}


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> None:
    """(Re)configure the ``msatrigger`` logger tree.

    Called twice per run: once from the command line flags, then again from
    the loaded settings. Handlers from the previous call are closed.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format ("json" or "text").
        log_file: Path to log file (None = stderr only).
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.
    """
    trigger_logger = logging.getLogger(ROOT_LOGGER_NAME)
    trigger_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for old in list(trigger_logger.handlers):
        trigger_logger.removeHandler(old)
        old.close()

    formatter = _FORMATTERS.get(log_format, TextFormatter)()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(create_rotating_handler(log_file, rotation=rotation, retention=retention))

    for handler in handlers:
        handler.setFormatter(formatter)
        trigger_logger.addHandler(handler)
