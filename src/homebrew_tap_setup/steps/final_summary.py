from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from homebrew_tap_setup.inputs import FormulaMode
from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.step import Step, VerifyStatus


def render_summary(context: RunContext) -> list[str]:
    inputs = context.inputs
    tap_path = context.state.tap_path or "<unknown>"
    install_formula = context.state.formula_name or inputs.tap

    lines = [
        "",
        "Summary",
        f"  Run ID: {context.run_id}",
        f"  Repo: {inputs.repo_slug}",
        f"  Tap path: {tap_path}",
        f"  State: {context.state_path}",
    ]
    if inputs.formula_mode == FormulaMode.STUB:
        lines.append(f"  Stub formula: {tap_path}/Formula/{inputs.tap}.rb")
    else:
        lines.append(f"  Formula directory: {tap_path}/Formula")

    lines += [
        "",
        "Next steps",
        "  - Edit the formula and replace the TODO fields.",
        f"  - brew install {inputs.tap_name}/{install_formula} "
        "(once the formula URL and sha256 are valid)",
    ]
    return lines


@dataclass(frozen=True, slots=True)
class FinalSummaryStep(Step):
    """Print where everything ended up. Runs once per run."""

    step_id: ClassVar[str] = "final_summary"
    description: ClassVar[str] = "Final summary"

    def preflight(self, context: RunContext) -> None:
        return None

    def apply(self, context: RunContext) -> None:
        for line in render_summary(context):
            print(line)

        context.state.summary_printed = True
        context.persist()

    def verify(self, context: RunContext) -> VerifyStatus:
        if context.state.summary_printed:
            return VerifyStatus.COMPLETE
        return VerifyStatus.INCOMPLETE
