# src/storage/finalizer.py - v2
"""Finalizer: relocate a complete batch and write its completion marker.

Steps, in this order:
  1. stage    - create the destination; if it holds undersized payload
                files from an interrupted copy, wipe all but the failure marker
  2. copy     - copy the batch directory tree under the overwrite policy
  3. cleanup  - optionally remove files/directories from the source
  4. marker   - write the completion marker, then clear any failure marker

Any failure raises FinalizeError before the completion marker exists, so the
next triggering file for the (still complete) ledger retries every step.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from msatrigger.config.settings import Settings
from msatrigger.core.errors import FinalizeError
from msatrigger.logging.context import set_step_context
from msatrigger.storage import markers
from msatrigger.storage.models import MarkerRecord

logger = logging.getLogger(__name__)


class Finalizer:
    """Run the finalize protocol for one batch."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def finalize(self, batch_dir: Path, destination: Path, trigger_file: Path) -> Path:
        """Run all steps and return the completion marker path.

        Raises:
            FinalizeError: If any step fails.
        """
        batch_dir = Path(batch_dir)
        destination = Path(destination)
        if destination.resolve().is_relative_to(batch_dir.resolve()):
            raise FinalizeError(
                f"Destination '{destination}' lies inside the batch directory '{batch_dir}'"
            )

        set_step_context("stage")
        try:
            self.stage_destination(destination)
        except OSError as exc:
            raise FinalizeError(
                f'Could not prepare destination: "{destination}": {exc}'
            ) from exc

        set_step_context("copy")
        logger.info('Copying directory: "%s" => "%s"', batch_dir, destination)
        try:
            self.relocate_payload(batch_dir, destination)
        except OSError as exc:
            raise FinalizeError(
                f'Could not copy "{batch_dir}" to "{destination}": {exc}'
            ) from exc

        set_step_context("cleanup")
        try:
            self.cleanup_source(batch_dir)
        except OSError as exc:
            raise FinalizeError(f'Could not clean up source "{batch_dir}": {exc}') from exc

        set_step_context("marker")
        try:
            return self.write_completion(destination, trigger_file)
        except OSError as exc:
            marker = destination / self._settings.token_file
            raise FinalizeError(f"Could not save trigger file '{marker}': {exc}") from exc

    def stage_destination(self, destination: Path) -> None:
        """Ensure ``destination`` exists and holds no partial payload files.

        The failure marker survives the wipe: it is what suppresses repeated
        notifications while the copy keeps failing.
        """
        destination.mkdir(parents=True, exist_ok=True)
        suffix = self._settings.payload_suffix
        min_size = self._settings.min_raw_files_to_move_again
        undersized = [
            p for p in destination.iterdir()
            if p.is_file() and p.name.lower().endswith(suffix) and p.stat().st_size < min_size
        ]
        if not undersized:
            return

        logger.info(
            "Found existing small %s files, previous copy may have been interrupted. "
            "Deleting contents of %s",
            suffix, destination,
        )
        failure_marker = self._settings.failure_token_file.lower()
        for entry in destination.iterdir():
            if entry.name.lower() == failure_marker:
                logger.debug("Keeping failure trigger file: '%s'", entry)
                continue
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()

    def relocate_payload(self, batch_dir: Path, destination: Path) -> None:
        """Copy the whole batch tree into ``destination``."""
        overwrite_older = self._settings.overwrite_older

        def _copy(src: str, dst: str) -> str:
            target = Path(dst)
            if target.exists():
                if not overwrite_older:
                    logger.debug("Not overwriting existing file: %s", target)
                    return dst
                if Path(src).stat().st_mtime <= target.stat().st_mtime:
                    logger.debug("Existing file is same age or newer, keeping: %s", target)
                    return dst
            return shutil.copy2(src, dst)

        shutil.copytree(batch_dir, destination, copy_function=_copy, dirs_exist_ok=True)

    def cleanup_source(self, batch_dir: Path) -> None:
        """Remove source files and directories as configured."""
        s = self._settings
        if not s.remove_files:
            logger.info("Not removing any files or subdirectories from: %s", batch_dir)
            return

        if s.preserve_sld:
            logger.info("Removing all non-manifest files but no subdirectories from: %s", batch_dir)
        elif s.remove_directories_effective:
            logger.info("Removing all files and directories from: %s", batch_dir)
        else:
            logger.info("Removing only files from: %s", batch_dir)

        files = sorted(p for p in batch_dir.rglob("*") if p.is_file())
        if s.preserve_sld:
            files = [p for p in files if not p.name.lower().endswith(s.manifest_suffix)]
        for path in files:
            logger.debug("Removing file: %s", path)
            path.unlink()

        if s.remove_directories_effective:
            logger.debug("Removing base directory: %s", batch_dir)
            shutil.rmtree(batch_dir)

    def write_completion(self, destination: Path, trigger_file: Path) -> Path:
        """Write the completion marker, then clear a prior failure marker."""
        s = self._settings
        record = MarkerRecord(
            trigger_date=markers.trigger_timestamp(),
            raw_file=str(trigger_file),
            repeat_run=markers.is_repeat_run(destination, trigger_file, s.repeat_run_matches),
        )
        path = markers.write_marker(destination / s.token_file, record)

        if markers.marker_exists(destination, s.failure_token_file):
            failure = destination / s.failure_token_file
            if markers.delete_marker(destination, s.failure_token_file):
                logger.info("Successfully deleted old failure trigger file: '%s'", failure)
            else:
                logger.warning("Problem deleting old failure trigger file: '%s'", failure)

        logger.info("Trigger file created: '%s'", path)
        return path
