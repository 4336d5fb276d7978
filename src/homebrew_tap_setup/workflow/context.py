from __future__ import annotations

import logging
import uuid
from pathlib import Path

from homebrew_tap_setup.inputs import TapInputs

from .errors import MissingConfigError
from .state import RunState
from .store import StateStore

logger = logging.getLogger(__name__)


class RunContext:
    """A run's identity, mutable state, embedded inputs and state store."""

    def __init__(
        self,
        *,
        run_id: str,
        dry_run: bool,
        store: StateStore,
        state: RunState,
        inputs: TapInputs,
    ) -> None:
        self.run_id = run_id
        self.dry_run = dry_run
        self.store = store
        self.state = state
        self.inputs = inputs

    @classmethod
    def new(cls, store: StateStore, *, dry_run: bool, inputs: TapInputs) -> RunContext:
        """Start a fresh run and write its initial snapshot."""

        run_id = str(uuid.uuid4())
        state = RunState(run_id=run_id, dry_run=dry_run, inputs=inputs)
        store.init_run(run_id, state)

        logger.info("Run created", extra={"run_id": run_id, "dry_run": dry_run})
        return cls(run_id=run_id, dry_run=dry_run, store=store, state=state, inputs=inputs)

    @classmethod
    def load(cls, store: StateStore, run_id: str, *, dry_run: bool) -> RunContext:
        """Resume an existing run.

        Only the dry-run flag is refreshed; the embedded inputs are reused as-is.
        """

        state = store.read_state(run_id)
        if state.inputs is None:
            raise MissingConfigError(f"State for run {run_id} does not contain inputs")

        state.dry_run = dry_run
        store.write_state(run_id, state)

        logger.info("Run loaded", extra={"run_id": run_id, "dry_run": dry_run})
        return cls(
            run_id=run_id, dry_run=dry_run, store=store, state=state, inputs=state.inputs
        )

    @property
    def state_path(self) -> Path:
        return self.store.locate(self.run_id)

    def persist(self) -> None:
        self.store.write_state(self.run_id, self.state)
