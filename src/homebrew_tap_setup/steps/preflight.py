from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from homebrew_tap_setup.commands import CommandRunner
from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.errors import CommandError, PreconditionError, ToolNotFoundError
from homebrew_tap_setup.workflow.step import Step, VerifyStatus


@dataclass(frozen=True, slots=True)
class RequiredCommand:
    name: str
    args: tuple[str, ...]
    label: str


DEFAULT_REQUIRED_COMMANDS: tuple[RequiredCommand, ...] = (
    RequiredCommand("git", ("--version",), "git"),
    RequiredCommand("brew", ("--version",), "homebrew"),
    RequiredCommand("gh", ("--version",), "GitHub CLI"),
)


@dataclass(frozen=True, slots=True)
class PreflightStep(Step):
    """Check that git, Homebrew and the GitHub CLI are installed and runnable."""

    step_id: ClassVar[str] = "preflight"
    description: ClassVar[str] = "Preflight checks"

    commands: CommandRunner = field(default_factory=CommandRunner)
    required: tuple[RequiredCommand, ...] = DEFAULT_REQUIRED_COMMANDS

    def check_required(self) -> None:
        missing: list[str] = []
        failures: list[str] = []

        for cmd in self.required:
            try:
                result = self.commands.capture([cmd.name, *cmd.args])
            except ToolNotFoundError:
                missing.append(cmd.label)
                continue
            except CommandError as e:
                failures.append(f"{cmd.label}: {e}")
                continue

            if not result.ok:
                failures.append(
                    f"{cmd.label}: {cmd.name} returned non-zero status: {result.returncode}"
                )

        if missing:
            raise PreconditionError(f"Missing required tools: {', '.join(missing)}")
        if failures:
            raise PreconditionError(f"Required tools failed to run: {'; '.join(failures)}")

    def preflight(self, context: RunContext) -> None:
        self.check_required()

    def apply(self, context: RunContext) -> None:
        return None

    def verify(self, context: RunContext) -> VerifyStatus:
        self.check_required()
        return VerifyStatus.COMPLETE
