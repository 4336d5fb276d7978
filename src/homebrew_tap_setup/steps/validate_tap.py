from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from homebrew_tap_setup.commands import CommandRunner, require_success
from homebrew_tap_setup.inputs import TapInputs
from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.errors import EffectError
from homebrew_tap_setup.workflow.step import Step, VerifyStatus


def tap_candidates(inputs: TapInputs) -> list[str]:
    """Identifiers under which `brew tap` may list this tap."""

    candidates = [inputs.repo_slug]
    if inputs.uses_default_repo_name:
        candidates.append(inputs.tap_name)
    return candidates


@dataclass(frozen=True, slots=True)
class ValidateTapStep(Step):
    """Make sure Homebrew has the tap registered."""

    step_id: ClassVar[str] = "validate_tap"
    description: ClassVar[str] = "Validate tap is registered"

    commands: CommandRunner = field(default_factory=CommandRunner)

    def tapped(self) -> set[str]:
        result = require_success(self.commands.capture(["brew", "tap"]), "brew tap")
        return {line.strip() for line in result.stdout.splitlines() if line.strip()}

    def preflight(self, context: RunContext) -> None:
        return None

    def apply(self, context: RunContext) -> None:
        identifier = context.inputs.tap_name
        print(f"    brew tap {identifier}")

        code = self.commands.stream(["brew", "tap", identifier])
        if code != 0:
            raise EffectError(f"brew tap returned non-zero status: {code}")

    def verify(self, context: RunContext) -> VerifyStatus:
        tapped = self.tapped()
        if any(identifier in tapped for identifier in tap_candidates(context.inputs)):
            return VerifyStatus.COMPLETE
        return VerifyStatus.INCOMPLETE
