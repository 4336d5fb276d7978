from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from homebrew_tap_setup.commands import CommandRunner, require_success
from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.errors import CheckError, CommandError, EffectError
from homebrew_tap_setup.workflow.step import Step, VerifyStatus

from ._common import require_git_tap, tap_path

COMMIT_MESSAGE = "Update tap files"


@dataclass(frozen=True, slots=True)
class GitStatus:
    dirty: bool
    branch: str
    has_upstream: bool
    ahead: int = 0
    behind: int = 0

    @property
    def synced(self) -> bool:
        return not self.dirty and self.has_upstream and self.ahead == 0


def parse_branch_line(line: str) -> tuple[str, bool, int, int]:
    """Parse the `## ...` header of `git status -sb`.

    Returns `(branch, has_upstream, ahead, behind)`. The branch is empty when
    the header cannot be parsed.
    """

    line = line.strip()
    if not line.startswith("## "):
        return "", False, 0, 0
    line = line[3:]

    branch_part, sep, rest = line.partition("...")
    if not sep:
        return line.strip(), False, 0, 0

    ahead = behind = 0
    start = rest.find("[")
    end = rest.find("]", start + 1)
    if start != -1 and end != -1:
        for part in rest[start + 1 : end].split(","):
            key, _, value = part.strip().partition(" ")
            if not value.strip().isdigit():
                continue
            if key == "ahead":
                ahead = int(value)
            elif key == "behind":
                behind = int(value)

    return branch_part.strip(), True, ahead, behind


@dataclass(frozen=True, slots=True)
class CommitAndPushStep(Step):
    """Commit pending tap changes and push them to `origin`."""

    step_id: ClassVar[str] = "commit_and_push"
    description: ClassVar[str] = "Commit and push changes"

    commands: CommandRunner = field(default_factory=CommandRunner)

    def _git(self, path: Path, *args: str) -> list[str]:
        return ["git", "-C", str(path), *args]

    def status(self, path: Path) -> GitStatus:
        porcelain = require_success(
            self.commands.capture(self._git(path, "status", "--porcelain")),
            "git status --porcelain",
        )
        dirty = bool(porcelain.stdout.strip())

        short = require_success(
            self.commands.capture(self._git(path, "status", "-sb")), "git status -sb"
        )
        first_line = next(iter(short.stdout.splitlines()), "")
        branch, has_upstream, ahead, behind = parse_branch_line(first_line)

        if not branch:
            rev = require_success(
                self.commands.capture(self._git(path, "rev-parse", "--abbrev-ref", "HEAD")),
                "git rev-parse",
            )
            branch = rev.stdout.strip()

        return GitStatus(
            dirty=dirty, branch=branch, has_upstream=has_upstream, ahead=ahead, behind=behind
        )

    def commit(self, path: Path, message: str) -> None:
        code = self.commands.stream(self._git(path, "add", "-A"))
        if code != 0:
            raise EffectError(f"git add returned non-zero status: {code}")

        result = self.commands.capture(self._git(path, "commit", "-m", message))
        if result.ok:
            return

        combined = (result.stdout + result.stderr).lower()
        if "nothing to commit" in combined:
            return
        raise EffectError(f"git commit failed: {combined.strip()}")

    def push(self, path: Path, branch: str, *, set_upstream: bool) -> None:
        args = ["push", "-u", "origin", branch] if set_upstream else ["push"]
        code = self.commands.stream(self._git(path, *args))
        if code != 0:
            raise EffectError(f"git push returned non-zero status: {code}")

    def preflight(self, context: RunContext) -> None:
        path = require_git_tap(context)
        result = self.commands.capture(self._git(path, "remote", "get-url", "origin"))
        if not result.ok:
            raise CommandError(f"origin remote is missing: {result.stderr.strip()}")

    def apply(self, context: RunContext) -> None:
        path = tap_path(context)

        status = self.status(path)
        if status.behind > 0:
            raise EffectError("local branch is behind origin; pull is required before pushing")

        if status.dirty:
            self.commit(path, COMMIT_MESSAGE)

        status = self.status(path)
        if status.behind > 0:
            raise EffectError("local branch is behind origin; pull is required before pushing")

        if status.ahead > 0 or not status.has_upstream:
            self.push(path, status.branch, set_upstream=not status.has_upstream)

    def verify(self, context: RunContext) -> VerifyStatus:
        status = self.status(tap_path(context))
        if status.behind > 0:
            raise CheckError("local branch is behind origin; pull is required before pushing")

        return VerifyStatus.COMPLETE if status.synced else VerifyStatus.INCOMPLETE
