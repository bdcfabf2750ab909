# src/core/errors.py - v1
"""Error taxonomy for a trigger invocation.

Internal code raises these; only ``pipeline.runner.run_invocation`` turns
them into log records, failure markers and exit codes.
"""

from __future__ import annotations


class TriggerError(Exception):
    """Base class for every fatal condition of one invocation."""

    kind = "trigger"
    exit_code = 1


class InputError(TriggerError):
    """Missing triggering file or unusable configuration."""

    kind = "input"


class ResolutionError(TriggerError):
    """No manifest, or several manifests with no safe pick."""

    kind = "resolution"


class LedgerError(TriggerError):
    """Empty ledger, or a triggering file that is not part of the batch."""

    kind = "ledger"


class FinalizeError(TriggerError):
    """Staging, copy, cleanup or marker write failed; safe to retry."""

    kind = "finalize"


class ManifestDecodeError(Exception):
    """Raised by manifest decoders when a file cannot be read as a sequence."""
