# src/manifest/base_decoder.py - v1
"""Abstract manifest decoder interface.

A decoder turns a manifest file into its ordered sample list. It never
touches the ledger; blank sample names are dropped by the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from msatrigger.core.models import ManifestSample


class BaseManifestDecoder(ABC):
    """Unified interface for sequence/manifest file readers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of this decoder (e.g. 'csv')."""

    @abstractmethod
    def decode(self, path: Path) -> list[ManifestSample]:
        """Return samples in manifest order.

        Raises:
            ManifestDecodeError: If the file cannot be read as a manifest.
        """
