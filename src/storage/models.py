# src/storage/models.py - v2
"""Marker file model shared by completion and failure markers."""

from __future__ import annotations

import re

from pydantic import BaseModel

_LINE_PATTERN = re.compile(r'^(\w+)="(.*)"$')


class MarkerRecord(BaseModel):
    """Contents of a completion marker, or of a failure marker when ``trigger_error`` is set."""

    trigger_date: str
    raw_file: str
    repeat_run: bool = False
    trigger_error: str | None = None

    @property
    def is_failure(self) -> bool:
        return self.trigger_error is not None

    def to_text(self) -> str:
        lines = [
            f'trigger_date="{self.trigger_date}"',
            f'raw_file="{self.raw_file}"',
            f'repeat_run="{"true" if self.repeat_run else "false"}"',
        ]
        if self.trigger_error is not None:
            lines.append(f'trigger_error="{self.trigger_error}"')
        return "\n".join(lines) + "\n"

    @classmethod
    def from_text(cls, text: str) -> MarkerRecord:
        fields: dict[str, str] = {}
        for line in text.splitlines():
            match = _LINE_PATTERN.match(line.strip())
            if match:
                fields[match.group(1)] = match.group(2)
        return cls(
            trigger_date=fields.get("trigger_date", ""),
            raw_file=fields.get("raw_file", ""),
            repeat_run=fields.get("repeat_run", "false").lower() == "true",
            trigger_error=fields.get("trigger_error"),
        )
