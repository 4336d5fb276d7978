from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from homebrew_tap_setup.commands import CommandRunner, require_success
from homebrew_tap_setup.github.client import GitHubClient
from homebrew_tap_setup.inputs import Visibility
from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.errors import CheckError, CommandError, EffectError
from homebrew_tap_setup.workflow.step import Step, VerifyStatus

from ._common import require_git_tap, tap_path

_MISSING_REMOTE_MARKERS = ("no such remote", "does not appear to be a git repository")


@dataclass(frozen=True, slots=True)
class GhRepoCreateStep(Step):
    """Create the GitHub repository from the local tap and push it.

    Idempotency is keyed on the remote state: the repository must exist on
    GitHub and the tap's `origin` must point at it.
    """

    step_id: ClassVar[str] = "gh_repo_create"
    description: ClassVar[str] = "Create GitHub repo and push"

    github: GitHubClient
    commands: CommandRunner = field(default_factory=CommandRunner)

    def remote_url(self, path: Path, remote: str = "origin") -> str | None:
        result = self.commands.capture(["git", "-C", str(path), "remote", "get-url", remote])
        if result.ok:
            return result.stdout.strip()

        stderr = result.stderr.lower()
        if any(marker in stderr for marker in _MISSING_REMOTE_MARKERS):
            return None
        raise CommandError(f"git remote get-url failed: {result.stderr.strip()}")

    def ensure_branch(self, path: Path, branch: str) -> None:
        result = require_success(
            self.commands.capture(["git", "-C", str(path), "rev-parse", "--abbrev-ref", "HEAD"]),
            "git rev-parse",
        )
        if result.stdout.strip() == branch:
            return

        code = self.commands.stream(["git", "-C", str(path), "branch", "-M", branch])
        if code != 0:
            raise EffectError(f"git branch -M returned non-zero status: {code}")

    def preflight(self, context: RunContext) -> None:
        require_git_tap(context)

    def apply(self, context: RunContext) -> None:
        path = tap_path(context)
        inputs = context.inputs

        self.ensure_branch(path, inputs.branch)

        visibility_flag = "--public" if inputs.visibility == Visibility.PUBLIC else "--private"
        print(f"    gh repo create {inputs.repo_slug} --source {path} --push")

        code = self.commands.stream(
            [
                "gh",
                "repo",
                "create",
                inputs.repo_slug,
                "--source",
                str(path),
                "--push",
                "--remote",
                "origin",
                visibility_flag,
            ]
        )
        if code != 0:
            raise EffectError(f"gh repo create returned non-zero status: {code}")

    def verify(self, context: RunContext) -> VerifyStatus:
        path = tap_path(context)
        repo_slug = context.inputs.repo_slug

        repo = self.github.get_repository(repo_slug)
        if repo is None:
            return VerifyStatus.INCOMPLETE

        remote = self.remote_url(path)
        if remote is None:
            raise CheckError(f"GitHub repo exists but no 'origin' remote is set for {path}")

        if not repo.matches_remote(remote):
            raise CheckError(f"origin remote does not match repo {repo_slug} (found: {remote})")

        return VerifyStatus.COMPLETE
