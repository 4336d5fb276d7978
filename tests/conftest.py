"""Test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

from homebrew_tap_setup.commands import CommandResult, CommandRunner
from homebrew_tap_setup.inputs import TapInputs
from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.step import VerifyStatus
from homebrew_tap_setup.workflow.store import StateStore


class FakeStep:
    """In-memory step whose goal state is a boolean flag.

    `fail_in` names a phase ("preflight", "apply" or "verify") that raises.
    With `apply_takes_effect=False`, apply succeeds but the goal never holds.
    """

    def __init__(
        self,
        step_id: str,
        *,
        done: bool = False,
        apply_takes_effect: bool = True,
        fail_in: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self.step_id = step_id
        self.description = f"Fake step {step_id}"
        self.done = done
        self.apply_takes_effect = apply_takes_effect
        self.fail_in = fail_in
        self.error = error or RuntimeError(f"{step_id} boom")
        self.calls: list[str] = []

    def _maybe_fail(self, phase: str) -> None:
        if self.fail_in == phase:
            raise self.error

    def preflight(self, context: RunContext) -> None:
        self.calls.append("preflight")
        self._maybe_fail("preflight")

    def apply(self, context: RunContext) -> None:
        self.calls.append("apply")
        self._maybe_fail("apply")
        if self.apply_takes_effect:
            self.done = True

    def verify(self, context: RunContext) -> VerifyStatus:
        self.calls.append("verify")
        self._maybe_fail("verify")
        return VerifyStatus.COMPLETE if self.done else VerifyStatus.INCOMPLETE

    def undo(self, context: RunContext) -> None:
        self.calls.append("undo")


@pytest.fixture
def fake_step() -> type[FakeStep]:
    """Provide the FakeStep class."""
    return FakeStep


@pytest.fixture
def state_store(tmp_path: Path) -> StateStore:
    """Provide a state store rooted in a temporary directory."""
    return StateStore(tmp_path / "state")


@pytest.fixture
def tap_inputs() -> TapInputs:
    """Provide default tap inputs."""
    return TapInputs(owner="octo-org", tap="tools")


@pytest.fixture
def run_context(state_store: StateStore, tap_inputs: TapInputs) -> RunContext:
    """Provide a freshly created run context."""
    return RunContext.new(state_store, dry_run=False, inputs=tap_inputs)


@pytest.fixture
def tap_dir(tmp_path: Path, run_context: RunContext) -> Path:
    """Provide an existing git-initialised tap directory recorded on the run."""
    path = tmp_path / "Taps" / "octo-org" / "homebrew-tools"
    (path / ".git").mkdir(parents=True)
    run_context.state.tap_path = str(path)
    run_context.persist()
    return path


@pytest.fixture
def mock_commands() -> Mock:
    """Provide a CommandRunner mock that succeeds with empty output by default."""
    commands = Mock(spec=CommandRunner)
    commands.capture.side_effect = lambda args, **_: CommandResult(args=tuple(args), returncode=0)
    commands.stream.return_value = 0
    return commands
