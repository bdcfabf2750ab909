# src/manifest/decoder_factory.py - v1
"""Factory: instantiate a manifest decoder by configured name."""

from __future__ import annotations

from msatrigger.manifest.base_decoder import BaseManifestDecoder
from msatrigger.manifest.csv_decoder import CsvManifestDecoder

# Registry maps decoder name -> decoder class.
_DECODER_REGISTRY: dict[str, type[BaseManifestDecoder]] = {
    "csv": CsvManifestDecoder,
}


class UnsupportedDecoderError(ValueError):
    """Raised when no decoder is registered under a name."""


def create_decoder(name: str) -> BaseManifestDecoder:
    """Create the decoder registered under ``name``.

    Raises:
        UnsupportedDecoderError: If no decoder is registered.
    """
    cls = _DECODER_REGISTRY.get(name.strip().lower())
    if cls is None:
        raise UnsupportedDecoderError(
            f"No manifest decoder named {name!r}. "
            f"Supported: {', '.join(supported_decoders())}"
        )
    return cls()


def register_decoder(name: str, cls: type[BaseManifestDecoder]) -> None:
    """Register a custom decoder (e.g. a binary sequence-file reader)."""
    _DECODER_REGISTRY[name.strip().lower()] = cls


def supported_decoders() -> list[str]:
    return sorted(_DECODER_REGISTRY)
