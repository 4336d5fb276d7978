"""Unit tests for external command execution."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from homebrew_tap_setup.commands import CommandResult, CommandRunner, require_success
from homebrew_tap_setup.workflow.errors import CommandError, ToolNotFoundError


def test_capture_collects_output(tmp_path: Path) -> None:
    runner = CommandRunner()

    script = "import os, sys; print(os.getcwd()); print('warn', file=sys.stderr)"

    result = runner.capture([sys.executable, "-c", script], cwd=tmp_path)

    assert result.ok
    assert result.returncode == 0
    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()
    assert result.stderr.strip() == "warn"
    assert result.args[0] == sys.executable


def test_capture_reports_non_zero_exit() -> None:
    result = CommandRunner().capture([sys.executable, "-c", "raise SystemExit(3)"])

    assert not result.ok
    assert result.returncode == 3


def test_capture_merges_environment() -> None:
    result = CommandRunner().capture(
        [sys.executable, "-c", "import os; print(os.environ['TAP_SETUP_TEST_VALUE'])"],
        env={"TAP_SETUP_TEST_VALUE": "hello"},
    )

    assert result.stdout.strip() == "hello"


def test_stream_returns_exit_code() -> None:
    assert CommandRunner().stream([sys.executable, "-c", "raise SystemExit(0)"]) == 0
    assert CommandRunner().stream([sys.executable, "-c", "raise SystemExit(5)"]) == 5


def test_missing_tool_raises_tool_not_found() -> None:
    with pytest.raises(ToolNotFoundError, match="failed to execute"):
        CommandRunner().capture(["definitely-not-a-real-tool-xyz", "--version"])


def test_timeout_raises_command_error() -> None:
    runner = CommandRunner(timeout=0.2)

    with pytest.raises(CommandError, match="timed out"):
        runner.capture([sys.executable, "-c", "import time; time.sleep(5)"])


def test_require_success_passes_through() -> None:
    result = CommandResult(args=("git", "status"), returncode=0, stdout="ok")

    assert require_success(result, "git status") is result


def test_require_success_uses_stderr() -> None:
    result = CommandResult(args=("git", "push"), returncode=1, stderr="rejected\n")

    with pytest.raises(CommandError, match="git push failed: rejected"):
        require_success(result, "git push")


def test_require_success_falls_back_to_exit_status() -> None:
    result = CommandResult(args=("brew", "tap"), returncode=2)

    with pytest.raises(CommandError, match="exit status 2"):
        require_success(result, "brew tap")
