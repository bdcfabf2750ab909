# src/ledger/completion.py - v1
"""Completion evaluator over a ledger snapshot."""

from __future__ import annotations

from msatrigger.ledger.ledger import ACQUIRED, AcquisitionLedger


def is_complete(ledger: AcquisitionLedger) -> bool:
    """True iff the ledger is non-empty and every entry is acquired.

    Entries never revert to pending, so once true this stays true.
    """
    statuses = ledger.statuses()
    return bool(statuses) and all(s == ACQUIRED for s in statuses)
