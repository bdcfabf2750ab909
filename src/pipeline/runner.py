# src/pipeline/runner.py - v3
"""Top-level invocation handler.

The only place that turns errors into log records, failure markers,
notifications and exit codes. Everything below it raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from msatrigger.config.settings import Settings
from msatrigger.core.errors import InputError, TriggerError
from msatrigger.core.models import TriggerOutcome
from msatrigger.logging.context import clear_context, set_invocation_context
from msatrigger.manifest.base_decoder import BaseManifestDecoder
from msatrigger.manifest.decoder_factory import UnsupportedDecoderError, create_decoder
from msatrigger.manifest.resolver import ManifestResolver
from msatrigger.manifest.scratch import ScratchCopies
from msatrigger.notify.base_notifier import ERROR_TITLE, BaseNotifier, send_notification
from msatrigger.notify.notifier_factory import create_notifier
from msatrigger.pipeline.orchestrator import TriggerOrchestrator
from msatrigger.storage.destination import compute_destination
from msatrigger.storage.failure_signal import FailureSignal
from msatrigger.storage.finalizer import Finalizer

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass
class InvocationResult:
    """Exit code plus what happened, for callers and tests."""

    exit_code: int
    outcome: TriggerOutcome | None = None
    error: str | None = None
    destination: Path | None = None


def run_invocation(
    trigger_file: Path | str | None,
    settings: Settings,
    notifier: BaseNotifier | None = None,
    decoder: BaseManifestDecoder | None = None,
    mock_sequence: list[str] | None = None,
) -> InvocationResult:
    """Handle one triggering file end to end.

    Args:
        trigger_file: Path of the file that just arrived.
        settings: Validated settings.
        notifier: Notification sink (default: from settings).
        decoder: Manifest decoder (default: from settings).
        mock_sequence: Expected file list standing in for a manifest.

    Returns:
        InvocationResult; ``exit_code`` is 0 for success or no-op, 1 otherwise.
    """
    notifier = notifier or create_notifier(settings)

    if trigger_file is None or not str(trigger_file).strip():
        return _input_failure(
            notifier, "Please pass in the full path to a RAW file (%R parameter)",
        )

    trigger = Path(trigger_file).expanduser().absolute()
    if not trigger.is_file():
        return _input_failure(notifier, f"{trigger} error: file does not exist. Exiting.")

    try:
        decoder = decoder or create_decoder(settings.manifest_decoder)
    except UnsupportedDecoderError as exc:
        return _input_failure(notifier, str(exc))

    batch_dir = trigger.parent
    destination = compute_destination(batch_dir, settings.output_root, settings.source_trim)
    set_invocation_context(str(batch_dir), str(trigger))
    logger.debug("Destination for %s: %s", batch_dir, destination)

    failure_signal = FailureSignal(settings, notifier)
    try:
        with ScratchCopies() as scratch:
            resolver = ManifestResolver(settings, decoder, scratch)
            orchestrator = TriggerOrchestrator(settings, resolver, Finalizer(settings))
            outcome = orchestrator.process(trigger, destination, mock_sequence)
    except TriggerError as exc:
        logger.error("%s error: %s", exc.kind, exc)
        failure_signal.on_error(destination, trigger, str(exc))
        return InvocationResult(exc.exit_code, error=str(exc), destination=destination)
    except Exception as exc:
        logger.exception("Unexpected error: %s", exc)
        failure_signal.on_error(destination, trigger, f"Error: {exc}")
        return InvocationResult(EXIT_FAILURE, error=str(exc), destination=destination)
    finally:
        clear_context()

    return InvocationResult(EXIT_OK, outcome=outcome, destination=destination)


def _input_failure(notifier: BaseNotifier, message: str) -> InvocationResult:
    """Input errors have no trustworthy destination: log and notify only."""
    logger.error(message)
    send_notification(notifier, ERROR_TITLE, message)
    return InvocationResult(InputError.exit_code, error=message)
