# src/core/models.py - v2
"""Core domain models shared across the trigger components."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ManifestSample(BaseModel):
    """One sample row of a decoded manifest."""

    raw_file_name: str
    path: str = ""

    def expected_name(self, payload_suffix: str) -> str:
        """File name the instrument writes for this sample (e.g. 'a01.raw')."""
        if self.raw_file_name.lower().endswith(payload_suffix.lower()):
            return self.raw_file_name
        return f"{self.raw_file_name}{payload_suffix}"


class ResolvedManifest(BaseModel):
    """The manifest chosen for a batch and the names it expects."""

    path: str
    expected_names: list[str] = Field(default_factory=list)
    mock: bool = False


class TriggerOutcome(BaseModel):
    """Result of one successful (non-fatal) invocation."""

    status: Literal["ignored", "pending", "finalized"]
    trigger_file: str
    destination: str | None = None
    acquired: int = 0
    total: int = 0
