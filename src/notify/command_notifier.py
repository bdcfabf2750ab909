# src/notify/command_notifier.py - v1
"""Notifier that hands title and message to an external command.

Example config: ``Notification_Command=notify-send --urgency=critical``.
"""

from __future__ import annotations

import logging
import shlex
import subprocess

from msatrigger.notify.base_notifier import BaseNotifier

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class CommandNotifier(BaseNotifier):
    """Run ``<command...> <title> <message>``."""

    def __init__(self, command: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._argv = shlex.split(command)
        if not self._argv:
            raise ValueError("CommandNotifier requires a non-empty command")
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "command"

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    def notify(self, title: str, message: str) -> None:
        cmd = [*self._argv, title, message]
        logger.debug("Running notification command: %s", cmd)
        proc = subprocess.run(
            cmd, capture_output=True, text=True, timeout=self._timeout,
        )
        if proc.returncode != 0:
            raise RuntimeError(
                f"notification command failed (exit={proc.returncode}): "
                f"{proc.stderr.strip()}"
            )
