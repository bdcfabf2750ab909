# src/notify/notifier_factory.py - v1
"""Factory: instantiate the notifier from configuration."""

from __future__ import annotations

from msatrigger.config.settings import Settings
from msatrigger.notify.base_notifier import BaseNotifier
from msatrigger.notify.log_notifier import LogNotifier, NullNotifier


def create_notifier(settings: Settings) -> BaseNotifier:
    """Create the notifier selected by NOTIFICATION_BACKEND.

    Raises:
        ValueError: If the backend is not supported.
    """
    if settings.notification_backend == "log":
        return LogNotifier()

    if settings.notification_backend == "none":
        return NullNotifier()

    if settings.notification_backend == "command":
        from msatrigger.notify.command_notifier import CommandNotifier

        return CommandNotifier(settings.notification_command)

    raise ValueError(f"Unsupported notification backend: {settings.notification_backend!r}")
