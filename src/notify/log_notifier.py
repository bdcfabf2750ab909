# src/notify/log_notifier.py - v1
"""Notifiers that need no external program."""

from __future__ import annotations

import logging

from msatrigger.notify.base_notifier import BaseNotifier

logger = logging.getLogger("msatrigger.notify")


class LogNotifier(BaseNotifier):
    """Emit notifications as ERROR records on the ``msatrigger.notify`` logger."""

    @property
    def name(self) -> str:
        return "log"

    def notify(self, title: str, message: str) -> None:
        logger.error("NOTIFICATION [%s] %s", title, message)


class NullNotifier(BaseNotifier):
    """Drop notifications (markers remain the only failure signal)."""

    @property
    def name(self) -> str:
        return "none"

    def notify(self, title: str, message: str) -> None:
        logger.debug("Notification suppressed: [%s] %s", title, message)
