# tests/unit/storage/test_models.py - v2
"""Tests for storage/models.py - MarkerRecord."""

from __future__ import annotations

from msatrigger.storage.models import MarkerRecord


class TestMarkerRecord:
    def test_completion_text(self):
        record = MarkerRecord(trigger_date="2024_3_7_9_5_2", raw_file="/data/run/a.raw")
        assert record.to_text() == (
            'trigger_date="2024_3_7_9_5_2"\n'
            'raw_file="/data/run/a.raw"\n'
            'repeat_run="false"\n'
        )
        assert record.is_failure is False

    def test_failure_text(self):
        record = MarkerRecord(
            trigger_date="2024_3_7_9_5_2", raw_file="a.raw",
            repeat_run=True, trigger_error="disk full",
        )
        lines = record.to_text().splitlines()
        assert lines[2] == 'repeat_run="true"'
        assert lines[3] == 'trigger_error="disk full"'
        assert record.is_failure is True

    def test_from_text(self):
        text = 'trigger_date="1_2_3_4_5_6"\nraw_file="b.raw"\nrepeat_run="true"\nignored line\n'
        record = MarkerRecord.from_text(text)
        assert record.trigger_date == "1_2_3_4_5_6"
        assert record.raw_file == "b.raw"
        assert record.repeat_run is True
        assert record.trigger_error is None
