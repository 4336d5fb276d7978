"""Persisted run state.

A run snapshot is the full `RunState` document. It is rewritten after every
observable transition, never patched.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from homebrew_tap_setup.inputs import TapInputs

SCHEMA_VERSION = 1


def utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"
    DRY_RUN = "dry_run"


class StepRecord(BaseModel):
    """Execution record for one step id within a run."""

    id: str
    status: StepStatus = StepStatus.PENDING
    started_at: str | None = None
    finished_at: str | None = None
    error: str | None = None
    skipped_apply: bool = False


class RunState(BaseModel):
    """State model for one workflow run.

    `inputs` is embedded once at creation and carried through every resume.
    The remaining optional fields are scratch values that steps write for
    later steps:

    - `tap_path`: written by `brew_tap_new`, read by every later step.
    - `formula_name`: written by `add_formula`, read by `final_summary`.
    - `summary_printed`: completion flag of `final_summary`.
    """

    schema_version: int = Field(default=SCHEMA_VERSION, description="State schema version")
    run_id: str
    started_at: str = Field(default_factory=utc_iso_now)
    dry_run: bool = False
    steps: list[StepRecord] = Field(default_factory=list)

    inputs: TapInputs | None = None

    tap_path: str | None = None
    formula_name: str | None = None
    summary_printed: bool = False

    def find_step(self, step_id: str) -> StepRecord | None:
        for record in self.steps:
            if record.id == step_id:
                return record
        return None

    def ensure_step(self, step_id: str) -> StepRecord:
        """Return the record for `step_id`, appending a pending one if absent."""

        record = self.find_step(step_id)
        if record is None:
            record = StepRecord(id=step_id)
            self.steps.append(record)
        return record
