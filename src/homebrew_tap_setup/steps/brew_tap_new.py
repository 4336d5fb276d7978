from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from homebrew_tap_setup.commands import CommandRunner, require_success
from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.errors import CheckError, CommandError, EffectError
from homebrew_tap_setup.workflow.step import Step, VerifyStatus


@dataclass(frozen=True, slots=True)
class BrewTapNewStep(Step):
    """Create the local tap with `brew tap-new`.

    Produces the `tap_path` scratch field that every later step reads.
    """

    step_id: ClassVar[str] = "brew_tap_new"
    description: ClassVar[str] = "Create local tap (brew tap-new)"

    commands: CommandRunner = field(default_factory=CommandRunner)

    def ensure_tap_path(self, context: RunContext) -> Path:
        """Resolve the tap path once and persist it for later steps."""

        if context.state.tap_path:
            return Path(context.state.tap_path)

        result = require_success(
            self.commands.capture(["brew", "--repository"]), "brew --repository"
        )
        base = result.stdout.strip()
        if not base:
            raise CommandError("brew --repository returned empty output")

        path = Path(base) / "Library" / "Taps" / context.inputs.owner / context.inputs.repo_name
        context.state.tap_path = str(path)
        context.persist()
        return path

    def preflight(self, context: RunContext) -> None:
        return None

    def apply(self, context: RunContext) -> None:
        repo_slug = context.inputs.repo_slug
        print(f"    brew tap-new {repo_slug}")

        code = self.commands.stream(["brew", "tap-new", repo_slug])
        if code != 0:
            raise EffectError(f"brew tap-new returned non-zero status: {code}")

        self.ensure_tap_path(context)

    def verify(self, context: RunContext) -> VerifyStatus:
        path = self.ensure_tap_path(context)
        if not path.exists():
            return VerifyStatus.INCOMPLETE

        if not (path / ".git").is_dir():
            raise CheckError(f"tap path exists but is not a git repo: {path}")

        return VerifyStatus.COMPLETE
