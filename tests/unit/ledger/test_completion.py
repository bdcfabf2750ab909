# tests/unit/ledger/test_completion.py - v1
"""Tests for ledger/completion.py."""

from __future__ import annotations

from msatrigger.ledger.completion import is_complete
from msatrigger.ledger.ledger import AcquisitionLedger


class TestIsComplete:
    def test_empty_is_not_complete(self):
        assert is_complete(AcquisitionLedger()) is False

    def test_partial(self):
        ledger = AcquisitionLedger.create(["a.raw", "b.raw"])
        ledger.mark_acquired("a.raw")
        assert is_complete(ledger) is False

    def test_all_acquired(self):
        ledger = AcquisitionLedger.create(["a.raw", "b.raw"])
        ledger.mark_acquired("b.raw")
        ledger.mark_acquired("a.raw")
        assert is_complete(ledger) is True

    def test_stays_complete(self):
        ledger = AcquisitionLedger.create(["a.raw"])
        ledger.mark_acquired("a.raw")
        assert is_complete(ledger)
        ledger.mark_acquired("a.raw")
        assert is_complete(ledger)

    def test_from_text(self):
        assert is_complete(AcquisitionLedger.from_text("a.raw=yes\nb.raw=yes\n"))
        assert not is_complete(AcquisitionLedger.from_text("a.raw=yes\nb.raw=no\n"))
