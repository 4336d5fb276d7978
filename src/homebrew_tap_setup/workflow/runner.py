"""Sequential step driver with idempotent resume.

For every step the runner checks `verify` before `apply`, so re-running a
partially completed run re-confirms finished steps without repeating their
effects. Any failure is recorded on the step, persisted, and aborts the run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from .context import RunContext
from .errors import (
    CheckError,
    EffectError,
    PostconditionMismatchError,
    PreconditionError,
    StepError,
    StorageError,
)
from .state import StepRecord, StepStatus, utc_iso_now
from .step import Step, VerifyStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Runner:
    """Execute an ordered list of steps against a run context."""

    def __init__(self, steps: Sequence[Step]) -> None:
        seen: set[str] = set()
        for step in steps:
            if step.step_id in seen:
                raise ValueError(f"Duplicate step id: {step.step_id}")
            seen.add(step.step_id)
        self._steps: tuple[Step, ...] = tuple(steps)

    def run(self, context: RunContext) -> None:
        context.state.dry_run = context.dry_run
        context.persist()

        for step in self._steps:
            self._run_step(step, context)

        logger.info("Run finished", extra={"run_id": context.run_id, "dry_run": context.dry_run})

    def _run_step(self, step: Step, context: RunContext) -> None:
        # Every step re-enters running, including ones already complete; apply is
        # still skipped for those, but their timestamps are refreshed.
        print(f"==> {step.description} ({step.step_id})")

        record = context.state.ensure_step(step.step_id)
        record.status = StepStatus.RUNNING
        record.started_at = utc_iso_now()
        record.finished_at = None
        record.error = None
        record.skipped_apply = False
        context.persist()
        logger.info("Step started", extra={"run_id": context.run_id, "step_id": step.step_id})

        try:
            self._drive(step, record, context)
        except Exception as e:
            record.status = StepStatus.FAILED
            record.finished_at = utc_iso_now()
            record.error = str(e)
            context.persist()
            logger.error(
                "Step failed",
                extra={"run_id": context.run_id, "step_id": step.step_id, "error": str(e)},
            )
            raise

    def _drive(self, step: Step, record: StepRecord, context: RunContext) -> None:
        _call_phase(step, "Preflight", PreconditionError, lambda: step.preflight(context))

        status = _call_phase(step, "Verify", CheckError, lambda: step.verify(context))
        if status is VerifyStatus.COMPLETE:
            self._finish(record, context, status=StepStatus.COMPLETE, skipped_apply=True)
            print("    already complete")
            return

        if context.dry_run:
            self._finish(record, context, status=StepStatus.DRY_RUN, skipped_apply=True)
            print("    dry-run: apply skipped")
            return

        _call_phase(step, "Apply", EffectError, lambda: step.apply(context))

        status = _call_phase(step, "Verify", CheckError, lambda: step.verify(context))
        if status is not VerifyStatus.COMPLETE:
            raise PostconditionMismatchError(
                f"Step {step.step_id} did not verify after apply. See logs/state for details.",
                step_id=step.step_id,
            )

        self._finish(record, context, status=StepStatus.COMPLETE, skipped_apply=False)

    @staticmethod
    def _finish(
        record: StepRecord, context: RunContext, *, status: StepStatus, skipped_apply: bool
    ) -> None:
        record.status = status
        record.finished_at = utc_iso_now()
        record.skipped_apply = skipped_apply
        context.persist()
        logger.info(
            "Step finished",
            extra={
                "run_id": context.run_id,
                "step_id": record.id,
                "status": status.value,
                "skipped_apply": skipped_apply,
            },
        )


def _call_phase(
    step: Step, phase: str, error_cls: type[StepError], call: Callable[[], T]
) -> T:
    """Invoke one phase of a step, classifying failures by phase.

    Storage errors pass through unchanged; everything else is wrapped in
    `error_cls` with the step id attached.
    """

    try:
        return call()
    except StorageError:
        raise
    except Exception as e:
        raise error_cls(
            f"{phase} failed for step {step.step_id}: {e}", step_id=step.step_id
        ) from e
