# src/notify/base_notifier.py - v1
"""Abstract notification sink.

Notifications are best effort: ``send_notification`` logs any failure and
never raises.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

ERROR_TITLE = "MassSpecTrigger Error"


class BaseNotifier(ABC):
    """Fire-and-forget channel for operator-facing error messages."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g. 'log', 'command')."""

    @abstractmethod
    def notify(self, title: str, message: str) -> None:
        """Deliver one notification."""


def send_notification(notifier: BaseNotifier, title: str, message: str) -> bool:
    """Deliver a notification, logging instead of raising on failure."""
    try:
        notifier.notify(title, message)
    except Exception as exc:
        logger.warning("Error displaying notification via %s: %s", notifier.name, exc, exc_info=True)
        return False
    return True
