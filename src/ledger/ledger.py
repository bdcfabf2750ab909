# src/ledger/ledger.py - v1
"""Acquisition ledger: which expected files of a batch have arrived.

On disk it is plain text in the batch directory, one ``name=status`` line per
expected file, names lower-cased, statuses ``yes``/``no``. The key set is
fixed at creation; statuses only move from ``no`` to ``yes``.

The file is not locked. Invocations for one directory are assumed to be
serialized by whatever triggers them; two truly concurrent writers can lose
an update.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Literal

from msatrigger.core.errors import LedgerError

logger = logging.getLogger(__name__)

AcquisitionStatus = Literal["yes", "no"]

PENDING: AcquisitionStatus = "no"
ACQUIRED: AcquisitionStatus = "yes"
_STATUSES = (PENDING, ACQUIRED)


def normalize_name(name: str) -> str:
    return name.strip().lower()


def is_ignored(name: str, ignore_pattern: str | None) -> bool:
    """True if ``name`` contains the ignore pattern (case-insensitive)."""
    if not ignore_pattern:
        return False
    return ignore_pattern.lower() in name.lower()


class AcquisitionLedger:
    """Ordered mapping of expected file name -> acquisition status."""

    def __init__(self, entries: dict[str, AcquisitionStatus] | None = None) -> None:
        self._entries: dict[str, AcquisitionStatus] = dict(entries or {})

    # --- Construction ---

    @classmethod
    def create(
        cls,
        expected_names: Iterable[str],
        ignore_pattern: str | None = None,
    ) -> AcquisitionLedger:
        """Build a ledger with every non-ignored name pending.

        Raises:
            LedgerError: If no name is left to track.
        """
        entries: dict[str, AcquisitionStatus] = {}
        for name in expected_names:
            key = normalize_name(name)
            if not key:
                continue
            if is_ignored(key, ignore_pattern):
                logger.debug('Not tracking "%s", it matches "%s"', key, ignore_pattern)
                continue
            entries.setdefault(key, PENDING)

        if not entries:
            raise LedgerError(
                "Acquisition ledger would be empty: the manifest lists no trackable files"
            )
        return cls(entries)

    @classmethod
    def from_text(cls, text: str) -> AcquisitionLedger:
        """Parse ledger text, skipping lines that are not ``key=yes|no``."""
        entries: dict[str, AcquisitionStatus] = {}
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            parts = line.split("=")
            if len(parts) != 2:
                logger.debug("Skipping unparsable ledger line %d: %r", lineno, line)
                continue
            key = normalize_name(parts[0])
            value = parts[1].strip().lower()
            if not key or value not in _STATUSES:
                logger.debug("Skipping invalid ledger line %d: %r", lineno, line)
                continue
            entries[key] = value  # type: ignore[assignment]
        return cls(entries)

    @classmethod
    def load(cls, path: Path) -> AcquisitionLedger:
        """Reconstruct a ledger from its file."""
        logger.debug("Acquisition ledger exists, reading values from: %s", path)
        return cls.from_text(Path(path).read_text(encoding="utf-8"))

    # --- Mutation ---

    def mark_acquired(self, file_name: str, ignore_pattern: str | None = None) -> bool:
        """Record the arrival of ``file_name``.

        Returns:
            True if the entry is now acquired, False if the name is ignored.

        Raises:
            LedgerError: If the name is not part of this batch.
        """
        key = normalize_name(file_name)
        if is_ignored(key, ignore_pattern):
            logger.info('"%s" matches "%s" and will be ignored', file_name, ignore_pattern)
            return False
        if key not in self._entries:
            raise LedgerError(f"File not found in manifest for this batch: {file_name}")
        if self._entries[key] == ACQUIRED:
            logger.debug("%s already marked acquired", key)
        self._entries[key] = ACQUIRED
        return True

    def save(self, path: Path) -> None:
        """Rewrite the whole ledger atomically (temp sibling, then replace)."""
        path = Path(path)
        tmp = path.with_name(path.name + ".tmp")
        with tmp.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(self.to_text())
        tmp.replace(path)

    # --- Views ---

    @property
    def entries(self) -> dict[str, AcquisitionStatus]:
        return dict(self._entries)

    @property
    def total(self) -> int:
        return len(self._entries)

    @property
    def acquired_count(self) -> int:
        return sum(1 for v in self._entries.values() if v == ACQUIRED)

    def pending_names(self) -> list[str]:
        return [k for k, v in self._entries.items() if v == PENDING]

    def statuses(self) -> list[AcquisitionStatus]:
        return list(self._entries.values())

    def to_text(self) -> str:
        return "".join(f"{k}={v}\n" for k, v in self._entries.items())

    def describe(self) -> str:
        if not self._entries:
            return "(empty)"
        return self.to_text().strip()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AcquisitionLedger):
            return NotImplemented
        return list(self._entries.items()) == list(other._entries.items())

    def __repr__(self) -> str:
        return f"AcquisitionLedger({self.acquired_count}/{self.total} acquired)"
