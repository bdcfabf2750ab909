# src/storage/markers.py - v1
"""Completion and failure marker files in the destination directory.

Downstream automation polls for these, so a marker is written to a temp
sibling, fsynced, then renamed into place: it is either absent or complete.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from msatrigger.storage.models import MarkerRecord

logger = logging.getLogger(__name__)


def trigger_timestamp(now: datetime | None = None) -> str:
    """Marker timestamp, unpadded local time: ``2024_3_7_9_5_2``."""
    ts = now or datetime.now()
    return f"{ts.year}_{ts.month}_{ts.day}_{ts.hour}_{ts.minute}_{ts.second}"


def is_repeat_run(destination: Path, trigger_file: Path, repeat_tag: str) -> bool:
    """True if the destination path or the file name carries the repeat tag."""
    if not repeat_tag:
        return False
    tag = repeat_tag.lower()
    return tag in str(destination).lower() or tag in Path(trigger_file).name.lower()


def sanitize_error(message: str) -> str:
    """Make an error message safe for a single quoted marker line."""
    safe = message.replace("\\", "/").replace('"', "'")
    return " ".join(safe.splitlines())


def write_marker(path: Path, record: MarkerRecord) -> Path:
    """Durably write ``record`` to ``path``."""
    tmp = path.with_name(path.name + ".tmp")
    with tmp.open("w", encoding="utf-8", newline="\n") as fh:
        fh.write(record.to_text())
        fh.flush()
        os.fsync(fh.fileno())
    tmp.replace(path)
    return path


def read_marker(path: Path) -> MarkerRecord:
    return MarkerRecord.from_text(Path(path).read_text(encoding="utf-8"))


def marker_exists(destination: Path, marker_name: str) -> bool:
    path = Path(destination) / marker_name
    if not Path(destination).is_dir():
        logger.debug("Destination does not exist yet, no marker: '%s'", path)
        return False
    exists = path.is_file()
    logger.debug("Marker '%s' %s", path, "exists" if exists else "does not exist")
    return exists


def delete_marker(destination: Path, marker_name: str) -> bool:
    """Remove a marker; True if it is gone afterwards."""
    path = Path(destination) / marker_name
    if not path.exists():
        logger.info("Did not delete marker, file not found: '%s'", path)
        return True
    logger.info("Deleting marker: '%s'", path)
    try:
        path.unlink()
    except OSError:
        logger.warning("Marker could not be deleted: '%s'", path, exc_info=True)
        return False
    return not path.exists()
