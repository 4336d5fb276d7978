"""Step-execution engine.

This package provides:
- the Step contract that every provisioning operation implements
- a persisted per-run state model and its JSON-file store
- a run context for starting or resuming a run
- a sequential runner with idempotent resume and halt-on-failure
"""

from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.errors import (
    CheckError,
    CommandError,
    CorruptStateError,
    EffectError,
    MissingConfigError,
    NotFoundError,
    PostconditionMismatchError,
    PreconditionError,
    StepError,
    StorageError,
    TapSetupError,
    ToolNotFoundError,
)
from homebrew_tap_setup.workflow.runner import Runner
from homebrew_tap_setup.workflow.state import RunState, StepRecord, StepStatus
from homebrew_tap_setup.workflow.step import Step, VerifyStatus
from homebrew_tap_setup.workflow.store import StateStore

__all__ = [
    "CheckError",
    "CommandError",
    "CorruptStateError",
    "EffectError",
    "MissingConfigError",
    "NotFoundError",
    "PostconditionMismatchError",
    "PreconditionError",
    "RunContext",
    "RunState",
    "Runner",
    "StateStore",
    "Step",
    "StepError",
    "StepRecord",
    "StepStatus",
    "StorageError",
    "TapSetupError",
    "ToolNotFoundError",
    "VerifyStatus",
]
