from __future__ import annotations

from pathlib import Path

from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.errors import PreconditionError


def tap_path(context: RunContext) -> Path:
    """The local tap path recorded by `brew_tap_new`."""

    value = (context.state.tap_path or "").strip()
    if not value:
        raise PreconditionError("tap path is not set; brew tap-new must run first")
    return Path(value)


def require_git_tap(context: RunContext) -> Path:
    path = tap_path(context)
    if not path.exists():
        raise PreconditionError(f"tap path does not exist: {path}")
    if not (path / ".git").is_dir():
        raise PreconditionError(f"tap path is not a git repo: {path}")
    return path
