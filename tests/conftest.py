# tests/conftest.py - v2
"""Shared test fixtures for all unit and integration tests.

Provides a settings factory, a batch directory layout under tmp_path, an
in-memory manifest decoder and a recording notifier. No test touches
anything outside tmp_path.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from msatrigger.config.settings import Settings
from msatrigger.core.errors import ManifestDecodeError
from msatrigger.core.models import ManifestSample
from msatrigger.logging.context import clear_context
from msatrigger.manifest.base_decoder import BaseManifestDecoder
from msatrigger.notify.base_notifier import BaseNotifier


class StaticDecoder(BaseManifestDecoder):
    """Decoder returning a fixed sample list per manifest file name."""

    def __init__(self, samples: dict[str, list[str]] | None = None) -> None:
        self.samples = samples or {}
        self.decoded: list[Path] = []

    @property
    def name(self) -> str:
        return "static"

    def decode(self, path: Path) -> list[ManifestSample]:
        self.decoded.append(Path(path))
        names = self.samples.get(Path(path).name)
        if names is None:
            raise ManifestDecodeError(f"unknown manifest {path}")
        return [ManifestSample(raw_file_name=n, path="D:\\Transfer") for n in names]


class RecordingNotifier(BaseNotifier):
    """Notifier that remembers every message."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "recording"

    def notify(self, title: str, message: str) -> None:
        self.messages.append((title, message))


# === FIXTURES ===


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    return tmp_path / "nas" / "out"


@pytest.fixture
def make_settings(output_root: Path) -> Callable[..., Settings]:
    """Factory for Settings pointing at tmp_path, ignoring any env file."""

    def _make(**overrides: object) -> Settings:
        values: dict[str, object] = {"output_directory": str(output_root)}
        values.update(overrides)
        return Settings(_env_file=None, **values)  # type: ignore[call-arg]

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., Settings]) -> Settings:
    return make_settings()


@pytest.fixture
def batch_dir(tmp_path: Path) -> Path:
    """Batch directory below a 'Transfer' segment, like the instrument PC layout."""
    d = tmp_path / "data" / "Transfer" / "Exploris1" / "run42"
    d.mkdir(parents=True)
    return d


@pytest.fixture
def destination(output_root: Path) -> Path:
    """Destination of ``batch_dir`` with the default 'Transfer' trim."""
    return output_root / "Exploris1" / "run42"


@pytest.fixture
def decoder() -> StaticDecoder:
    return StaticDecoder()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


def write_file(path: Path, size: int = 200_000, mtime: float | None = None) -> Path:
    """Create ``path`` with ``size`` bytes, optionally setting its mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\0" * size)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def make_file() -> Callable[..., Path]:
    return write_file
