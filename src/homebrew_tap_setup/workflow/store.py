"""Durable, run-id keyed storage of run snapshots.

Layout: `<base_dir>/runs/<run_id>/state.json`.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from .errors import CorruptStateError, NotFoundError, StorageError
from .state import SCHEMA_VERSION, RunState

logger = logging.getLogger(__name__)

STATE_FILE_NAME = "state.json"


class StateStore:
    """JSON-file backed store for run snapshots.

    Writes go through a temporary file in the run directory followed by an
    atomic rename, so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = base_dir

    def run_dir(self, run_id: str) -> Path:
        # Run ids come from the command line; keep them inside `runs/`.
        if not run_id or run_id in {".", ".."} or "/" in run_id or os.sep in run_id:
            raise NotFoundError(f"Invalid run id: {run_id!r}")
        return self._base_dir / "runs" / run_id

    def locate(self, run_id: str) -> Path:
        """Path of the run's snapshot, for display."""

        return self.run_dir(run_id) / STATE_FILE_NAME

    def init_run(self, run_id: str, state: RunState) -> None:
        run_dir = self.run_dir(run_id)
        try:
            run_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create run directory: {run_dir}: {e}") from e

        logger.info("Run initialised", extra={"run_id": run_id, "path": str(run_dir)})
        self.write_state(run_id, state)

    def read_state(self, run_id: str) -> RunState:
        path = self.locate(run_id)
        if not path.exists():
            raise NotFoundError(f"No state found for run {run_id}: {path}")

        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptStateError(f"State is not valid UTF-8: {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read state: {path}: {e}") from e

        try:
            state = RunState.model_validate_json(raw)
        except ValidationError as e:
            raise CorruptStateError(f"Failed to parse state: {path}: {e}") from e

        if state.schema_version > SCHEMA_VERSION:
            raise CorruptStateError(
                f"Unsupported state schema version {state.schema_version} "
                f"(expected <= {SCHEMA_VERSION}): {path}"
            )

        logger.debug("State loaded", extra={"run_id": run_id, "steps": len(state.steps)})
        return state

    def write_state(self, run_id: str, state: RunState) -> None:
        path = self.locate(run_id)
        payload = json.dumps(state.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"

        try:
            fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".state-", suffix=".tmp")
        except OSError as e:
            raise StorageError(f"Failed to write state: {path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
        except OSError as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise StorageError(f"Failed to write state: {path}: {e}") from e

        logger.debug("State saved", extra={"run_id": run_id, "path": str(path)})
