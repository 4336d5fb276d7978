"""Provisioning steps for a Homebrew tap.

Order matters: every step after `brew_tap_new` reads the `tap_path` it records.
"""

from __future__ import annotations

from homebrew_tap_setup.commands import CommandRunner
from homebrew_tap_setup.github.client import GitHubClient
from homebrew_tap_setup.steps.add_formula import AddFormulaStep
from homebrew_tap_setup.steps.brew_tap_new import BrewTapNewStep
from homebrew_tap_setup.steps.commit_and_push import CommitAndPushStep
from homebrew_tap_setup.steps.final_summary import FinalSummaryStep
from homebrew_tap_setup.steps.gh_repo_create import GhRepoCreateStep
from homebrew_tap_setup.steps.preflight import PreflightStep
from homebrew_tap_setup.steps.validate_tap import ValidateTapStep
from homebrew_tap_setup.workflow.step import Step


def default_steps(*, commands: CommandRunner, github: GitHubClient) -> list[Step]:
    return [
        PreflightStep(commands=commands),
        BrewTapNewStep(commands=commands),
        GhRepoCreateStep(github=github, commands=commands),
        AddFormulaStep(commands=commands),
        CommitAndPushStep(commands=commands),
        ValidateTapStep(commands=commands),
        FinalSummaryStep(),
    ]


__all__ = [
    "AddFormulaStep",
    "BrewTapNewStep",
    "CommitAndPushStep",
    "FinalSummaryStep",
    "GhRepoCreateStep",
    "PreflightStep",
    "ValidateTapStep",
    "default_steps",
]
