# src/storage/failure_signal.py - v1
"""De-duplicated failure reporting.

The failure marker in the destination is the only memory shared between
invocations: while it exists, repeated errors neither rewrite it nor
notify again. A successful finalize deletes it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from msatrigger.config.settings import Settings
from msatrigger.notify.base_notifier import ERROR_TITLE, BaseNotifier, send_notification
from msatrigger.storage import markers
from msatrigger.storage.models import MarkerRecord

logger = logging.getLogger(__name__)


class FailureSignal:
    """Create-or-suppress failure marker plus one notification per marker."""

    def __init__(self, settings: Settings, notifier: BaseNotifier) -> None:
        self._settings = settings
        self._notifier = notifier

    def on_error(self, destination: Path, trigger_file: Path, message: str) -> bool:
        """Report ``message`` unless a failure marker already exists.

        Returns:
            True if a new failure was signalled, False if it was suppressed.
        """
        destination = Path(destination)
        marker_name = self._settings.failure_token_file
        logger.info("Got error '%s', will create failure trigger file if required", message)

        if markers.marker_exists(destination, marker_name):
            logger.info("Failure trigger file already exists: '%s'", destination / marker_name)
            logger.info("Not creating new failure trigger file for error: '%s'", message)
            return False

        record = MarkerRecord(
            trigger_date=markers.trigger_timestamp(),
            raw_file=str(trigger_file),
            repeat_run=markers.is_repeat_run(
                destination, trigger_file, self._settings.repeat_run_matches,
            ),
            trigger_error=markers.sanitize_error(message),
        )
        try:
            destination.mkdir(parents=True, exist_ok=True)
            path = markers.write_marker(destination / marker_name, record)
            logger.info("Failure trigger file created: %s", path)
        except OSError:
            logger.error(
                "Could not create failure trigger file in '%s'", destination, exc_info=True,
            )

        send_notification(self._notifier, ERROR_TITLE, message)
        return True
