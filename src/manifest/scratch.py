# src/manifest/scratch.py - v1
"""Private working copies of manifest files.

The instrument software may hold the manifest open, so decoders read a
copy placed in a temp dir. Copies live for one process and are removed on
every exit path.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "manifest-copy-"


class ScratchCopies:
    """Own the temp dirs holding manifest copies for one invocation."""

    def __init__(self, prefix: str = SCRATCH_PREFIX) -> None:
        self._prefix = prefix
        self._dirs: list[Path] = []

    def __enter__(self) -> ScratchCopies:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    @property
    def directories(self) -> list[Path]:
        return list(self._dirs)

    def working_copy(self, source: Path) -> Path:
        """Return a private copy of ``source``, reusing one with same name and size.

        Raises:
            FileNotFoundError: If the manifest does not exist.
        """
        source = Path(source)
        if not source.is_file():
            raise FileNotFoundError(f"Manifest file not found: '{source}'")

        size = source.stat().st_size
        for directory in self._dirs:
            candidate = directory / source.name
            if candidate.is_file() and candidate.stat().st_size == size:
                logger.info("Found existing temp copy of '%s', reading from copy", source)
                return candidate

        directory = Path(tempfile.mkdtemp(prefix=self._prefix))
        self._dirs.append(directory)
        logger.info("Temp directory created: '%s'", directory)

        copy = directory / source.name
        logger.info("Making temp copy of manifest: '%s' => '%s'", source, copy)
        shutil.copy2(source, copy)
        return copy

    def cleanup(self) -> None:
        """Delete every temp dir this instance created under the system temp root."""
        temp_root = Path(tempfile.gettempdir()).resolve()
        for directory in self._dirs:
            if not directory.exists():
                continue
            if not directory.resolve().is_relative_to(temp_root):
                logger.warning("Refusing to delete non-temp directory: '%s'", directory)
                continue
            logger.info("Deleting temp directory: '%s'", directory)
            try:
                shutil.rmtree(directory)
            except OSError:
                logger.warning("Could not delete temp directory '%s'", directory, exc_info=True)
        self._dirs.clear()
