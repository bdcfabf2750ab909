# src/pipeline/orchestrator.py - v2
"""Trigger orchestrator: one arrived file through ledger, completion and finalize.

Control flow per invocation:
    ledger file present?  yes -> load it
                          no  -> resolve manifest -> create ledger
    mark triggering file acquired -> save ledger
    complete?             no  -> done (pending)
                          yes -> Finalizer

Errors are raised as TriggerError subclasses; reporting happens in the runner.
"""

from __future__ import annotations

import logging
from pathlib import Path

from msatrigger.config.settings import Settings
from msatrigger.core.errors import LedgerError
from msatrigger.core.models import TriggerOutcome
from msatrigger.ledger.completion import is_complete
from msatrigger.ledger.ledger import AcquisitionLedger, is_ignored
from msatrigger.logging.context import set_step_context
from msatrigger.manifest.resolver import ManifestResolver
from msatrigger.storage.finalizer import Finalizer

logger = logging.getLogger(__name__)


class TriggerOrchestrator:
    """Process a single triggering file for its batch directory."""

    def __init__(
        self,
        settings: Settings,
        resolver: ManifestResolver,
        finalizer: Finalizer,
    ) -> None:
        self._settings = settings
        self._resolver = resolver
        self._finalizer = finalizer

    def ledger_path(self, batch_dir: Path) -> Path:
        return Path(batch_dir) / self._settings.ledger_file

    def process(
        self,
        trigger_file: Path,
        destination: Path,
        mock_sequence: list[str] | None = None,
    ) -> TriggerOutcome:
        """Update the batch ledger for ``trigger_file`` and finalize when complete.

        Raises:
            TriggerError: Any resolution, ledger or finalize failure.
        """
        ignore = self._settings.ignore_pattern
        if is_ignored(trigger_file.name, ignore):
            logger.info(
                "Provided file '%s' matches \"%s\" and will be ignored", trigger_file.name, ignore,
            )
            return TriggerOutcome(status="ignored", trigger_file=str(trigger_file))

        batch_dir = trigger_file.parent
        ledger_path = self.ledger_path(batch_dir)
        ledger, source = self._open_ledger(batch_dir, ledger_path, trigger_file, mock_sequence)

        set_step_context("ledger")
        if len(ledger) == 0:
            raise LedgerError(
                f"Acquisition ledger is empty. Check {source} and {ledger_path}"
            )

        try:
            ledger.mark_acquired(trigger_file.name, ignore)
        except LedgerError as exc:
            raise LedgerError(
                f"Could not update acquisition ledger '{ledger_path}' for '{trigger_file}': "
                f"{exc} (manifest: {source})"
            ) from exc

        try:
            ledger.save(ledger_path)
        except OSError as exc:
            raise LedgerError(f"Could not write acquisition ledger '{ledger_path}': {exc}") from exc
        logger.info("Updated acquisition status for file %s", trigger_file)
        logger.debug("%s contents:\n%s", ledger_path.name, ledger.describe())

        acquired, total = ledger.acquired_count, ledger.total
        if not is_complete(ledger):
            logger.info(
                "%d/%d files acquired, not performing payload activities yet", acquired, total,
            )
            return TriggerOutcome(
                status="pending", trigger_file=str(trigger_file),
                destination=str(destination), acquired=acquired, total=total,
            )

        logger.info("%d/%d files acquired, beginning payload activity ...", acquired, total)
        self._finalizer.finalize(batch_dir, destination, trigger_file)
        logger.info("Processing completed successfully")
        return TriggerOutcome(
            status="finalized", trigger_file=str(trigger_file),
            destination=str(destination), acquired=acquired, total=total,
        )

    def _open_ledger(
        self,
        batch_dir: Path,
        ledger_path: Path,
        trigger_file: Path,
        mock_sequence: list[str] | None,
    ) -> tuple[AcquisitionLedger, str]:
        """Load the existing ledger, or build one from the resolved manifest."""
        set_step_context("ledger")
        logger.debug("Checking for acquisition ledger: '%s'", ledger_path)
        if ledger_path.is_file():
            try:
                return AcquisitionLedger.load(ledger_path), str(ledger_path)
            except (OSError, UnicodeDecodeError) as exc:
                raise LedgerError(f"Could not read acquisition ledger '{ledger_path}': {exc}") from exc

        logger.debug("Acquisition ledger does not exist, looking for manifest ...")
        set_step_context("resolve")
        resolved = self._resolver.resolve(batch_dir, trigger_file, mock_sequence)
        ledger = AcquisitionLedger.create(resolved.expected_names, self._settings.ignore_pattern)
        return ledger, resolved.path
