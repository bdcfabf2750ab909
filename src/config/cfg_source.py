# src/config/cfg_source.py - v1
"""pydantic-settings source for the historical ``Key=value`` trigger config file.

Values are taken literally: the line is split at the first ``=``, both sides
are trimmed and surrounding ``'``/``"`` characters are stripped. No escape
sequences are decoded, so ``Output_Directory="D:\\new\\transfer"`` keeps its
backslashes. Lines that are blank, start with ``#`` or carry no ``=`` are
skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

logger = logging.getLogger(__name__)


def parse_cfg_text(text: str) -> dict[str, str]:
    """Parse config file text into a lower-cased key -> raw value mapping."""
    values: dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            logger.debug("Skipping config line %d without a key: %r", lineno, line)
            continue
        values[key.lower()] = value.strip().strip("'\"")
    return values


def read_cfg_file(path: Path, encoding: str = "utf-8-sig") -> dict[str, str]:
    """Read and parse a config file.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid text.
    """
    return parse_cfg_text(Path(path).read_text(encoding=encoding))


class CfgFileSettingsSource(PydanticBaseSettingsSource):
    """Feed settings fields from one config file, matching keys case-insensitively."""

    def __init__(self, settings_cls: type[BaseSettings], cfg_file: Path | None) -> None:
        super().__init__(settings_cls)
        self._cfg_file = cfg_file
        self._values = read_cfg_file(cfg_file) if cfg_file is not None else {}

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._values.get(field_name.lower()), field_name, False

    def __call__(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, key, _ = self.get_field_value(field, field_name)
            if value is not None:
                data[key] = value
        return data

    def __repr__(self) -> str:
        return f"CfgFileSettingsSource(cfg_file={self._cfg_file!r})"
