# tests/unit/manifest/test_scratch.py - v1
"""Tests for manifest/scratch.py - private manifest working copies."""

from __future__ import annotations

from pathlib import Path

import pytest

from msatrigger.manifest.scratch import ScratchCopies


class TestScratchCopies:
    def test_copy_and_cleanup(self, tmp_path: Path):
        source = tmp_path / "Exploris_seq.sld"
        source.write_text("File Name\na\n", encoding="utf-8")

        with ScratchCopies() as scratch:
            copy = scratch.working_copy(source)
            assert copy != source
            assert copy.name == source.name
            assert copy.read_text(encoding="utf-8") == "File Name\na\n"
            directory = copy.parent
            assert scratch.directories == [directory]

        assert not directory.exists()
        assert source.exists()

    def test_reuses_same_size_copy(self, tmp_path: Path):
        source = tmp_path / "seq.sld"
        source.write_text("abc", encoding="utf-8")
        with ScratchCopies() as scratch:
            first = scratch.working_copy(source)
            second = scratch.working_copy(source)
            assert first == second
            assert len(scratch.directories) == 1

    def test_new_copy_when_size_changes(self, tmp_path: Path):
        source = tmp_path / "seq.sld"
        source.write_text("abc", encoding="utf-8")
        with ScratchCopies() as scratch:
            first = scratch.working_copy(source)
            source.write_text("abcdef", encoding="utf-8")
            second = scratch.working_copy(source)
            assert first != second
            assert second.read_text(encoding="utf-8") == "abcdef"
            assert len(scratch.directories) == 2

    def test_missing_source(self, tmp_path: Path):
        with ScratchCopies() as scratch:
            with pytest.raises(FileNotFoundError):
                scratch.working_copy(tmp_path / "missing.sld")
            assert scratch.directories == []

    def test_cleanup_on_error(self, tmp_path: Path):
        source = tmp_path / "seq.sld"
        source.write_text("abc", encoding="utf-8")
        with pytest.raises(RuntimeError):
            with ScratchCopies() as scratch:
                directory = scratch.working_copy(source).parent
                raise RuntimeError("boom")
        assert not directory.exists()
