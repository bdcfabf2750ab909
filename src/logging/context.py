# src/logging/context.py - v2
"""Contextual logging support: attach batch_dir, trigger_file, step to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set once per invocation.
_batch_dir: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "batch_dir", default=None
)
_trigger_file: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "trigger_file", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    batch_dir: str | None = None
    trigger_file: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        batch_dir=_batch_dir.get(),
        trigger_file=_trigger_file.get(),
        step=_step.get(),
    )


def set_invocation_context(batch_dir: str, trigger_file: str) -> None:
    """Set invocation-level context (called once per triggering file)."""
    _batch_dir.set(batch_dir)
    _trigger_file.set(trigger_file)


def set_step_context(step: str | None) -> None:
    """Set the current step (resolve, ledger, stage, copy, cleanup, marker)."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _batch_dir.set(None)
    _trigger_file.set(None)
    _step.set(None)
