# src/manifest/csv_decoder.py - v1
"""Decoder for sequence tables exported as CSV by the acquisition software.

Expected layout: an optional ``Bracket Type=N`` preamble line, a header row
containing ``File Name`` (and usually ``Path``), then one row per sample.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

from msatrigger.core.errors import ManifestDecodeError
from msatrigger.core.models import ManifestSample
from msatrigger.manifest.base_decoder import BaseManifestDecoder

logger = logging.getLogger(__name__)

FILE_NAME_COLUMN = "file name"
PATH_COLUMN = "path"


class CsvManifestDecoder(BaseManifestDecoder):
    """Read samples from a CSV sequence export."""

    @property
    def name(self) -> str:
        return "csv"

    def decode(self, path: Path) -> list[ManifestSample]:
        try:
            text = Path(path).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise ManifestDecodeError(f"Cannot read manifest {path}: {exc}") from exc

        rows = list(csv.reader(io.StringIO(text)))
        header_index = _find_header(rows)
        if header_index is None:
            raise ManifestDecodeError(
                f"No '{FILE_NAME_COLUMN}' header row found in manifest {path}"
            )

        header = [cell.strip().lower() for cell in rows[header_index]]
        name_col = header.index(FILE_NAME_COLUMN)
        path_col = header.index(PATH_COLUMN) if PATH_COLUMN in header else None

        samples: list[ManifestSample] = []
        for row in rows[header_index + 1:]:
            raw_name = _cell(row, name_col)
            if not raw_name:
                continue
            samples.append(
                ManifestSample(
                    raw_file_name=raw_name,
                    path=_cell(row, path_col) if path_col is not None else "",
                )
            )

        logger.debug("Decoded %d samples from %s", len(samples), path)
        return samples


def _find_header(rows: list[list[str]]) -> int | None:
    for index, row in enumerate(rows):
        if any(cell.strip().lower() == FILE_NAME_COLUMN for cell in row):
            return index
    return None


def _cell(row: list[str], index: int | None) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index].strip()
