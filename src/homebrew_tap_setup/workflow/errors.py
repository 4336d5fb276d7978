"""Error taxonomy for the step-execution engine.

Every fatal condition aborts the run. The failing step's record is persisted
as `failed` before the error reaches the caller.
"""

from __future__ import annotations


class TapSetupError(Exception):
    """Base class for all errors raised by this package."""


class StepError(TapSetupError):
    """A step could not complete one of its phases."""

    def __init__(self, message: str, *, step_id: str | None = None) -> None:
        super().__init__(message)
        self.step_id = step_id


class PreconditionError(StepError):
    """The environment is unsuitable for the step to attempt its effect."""


class EffectError(StepError):
    """The step failed to perform its effect."""


class CheckError(StepError):
    """The step's verify check could not be performed."""


class PostconditionMismatchError(StepError):
    """Apply succeeded but the following verify still reports incomplete."""


class StorageError(TapSetupError):
    """The state store could not read or write a snapshot."""


class NotFoundError(StorageError):
    """No snapshot exists for the requested run id."""


class CorruptStateError(StorageError):
    """A snapshot exists but cannot be decoded."""


class MissingConfigError(TapSetupError):
    """A snapshot does not carry the embedded domain configuration."""


class CommandError(TapSetupError):
    """An external command could not run, exited non-zero or timed out."""


class ToolNotFoundError(CommandError):
    """The executable for an external command is not installed."""
