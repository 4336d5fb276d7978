"""External command execution.

Steps never call `subprocess` directly; they go through a `CommandRunner`
so tests can substitute a mock.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from homebrew_tap_setup.workflow.errors import CommandError, ToolNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a captured command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Run external commands synchronously.

    `timeout` (seconds) applies to every command; `None` waits indefinitely.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        self.timeout = timeout

    def capture(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run a command and capture its output. Non-zero exit is not an error."""

        completed = self._run(args, cwd=cwd, env=env, capture=True)
        return CommandResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def stream(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        """Run a command attached to the terminal and return its exit code."""

        return self._run(args, cwd=cwd, env=env, capture=False).returncode

    def _run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None,
        env: Mapping[str, str] | None,
        capture: bool,
    ) -> subprocess.CompletedProcess[str]:
        command = list(args)
        merged_env = {**os.environ, **env} if env is not None else None
        logger.debug("Running command", extra={"command": command, "cwd": str(cwd or "")})

        try:
            return subprocess.run(
                command,
                cwd=cwd,
                env=merged_env,
                capture_output=capture,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(f"failed to execute {command[0]}: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise CommandError(
                f"{' '.join(command)} timed out after {self.timeout} seconds"
            ) from e
        except OSError as e:
            raise CommandError(f"failed to execute {command[0]}: {e}") from e


def require_success(result: CommandResult, what: str) -> CommandResult:
    """Raise `CommandError` unless the command exited zero."""

    if not result.ok:
        detail = result.stderr.strip() or f"exit status {result.returncode}"
        raise CommandError(f"{what} failed: {detail}")
    return result
