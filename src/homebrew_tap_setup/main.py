"""CLI entrypoint for homebrew-tap-setup.

Starts a new run, or resumes an existing one by run id, and drives the default
step list through the runner.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from homebrew_tap_setup import __version__
from homebrew_tap_setup.commands import CommandRunner
from homebrew_tap_setup.config import TapSetupSettings
from homebrew_tap_setup.github.client import GitHubClient
from homebrew_tap_setup.inputs import FormulaMode, TapInputs, Visibility
from homebrew_tap_setup.logging import configure_logging
from homebrew_tap_setup.steps import default_steps
from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.errors import StepError, TapSetupError
from homebrew_tap_setup.workflow.runner import Runner
from homebrew_tap_setup.workflow.store import StateStore

logger = logging.getLogger(__name__)

# Flags that define the embedded inputs; they cannot change on resume.
INPUT_FLAGS: dict[str, str] = {
    "owner": "--owner",
    "tap": "--tap",
    "repo_name": "--repo-name",
    "visibility": "--visibility",
    "branch": "--branch",
    "formula_mode": "--formula-mode",
    "formula_url": "--formula-url",
    "formula_name": "--formula-name",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="homebrew-tap-setup",
        description="Homebrew tap setup helper",
    )
    parser.add_argument(
        "--version", action="version", version=f"homebrew-tap-setup {__version__}"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print actions without applying them",
    )
    parser.add_argument(
        "--resume", metavar="RUN_ID", default=None, help="Resume a previous run by ID"
    )

    # Input flags default to None so a resume can detect any that were passed.
    parser.add_argument("--owner", default=None, help="GitHub owner or org for the tap repo")
    parser.add_argument(
        "--tap", default=None, help="Tap short name (without the homebrew- prefix)"
    )
    parser.add_argument(
        "--repo-name", default=None, help="Override repo name (defaults to homebrew-<tap>)"
    )
    parser.add_argument(
        "--visibility",
        choices=[v.value for v in Visibility],
        default=None,
        help="Repository visibility (default: public)",
    )
    parser.add_argument("--branch", default=None, help="Branch to push (default: main)")
    parser.add_argument(
        "--formula-mode",
        choices=[m.value for m in FormulaMode],
        default=None,
        help="How to add the first formula (default: stub)",
    )
    parser.add_argument(
        "--formula-url",
        default=None,
        help="Source URL for brew create (required for brew-create mode)",
    )
    parser.add_argument(
        "--formula-name", default=None, help="Formula name to use with brew create (optional)"
    )
    return parser


def inputs_from_args(args: argparse.Namespace) -> TapInputs:
    """Build validated inputs for a new run.

    Raises:
        ValueError: If a required flag is missing.
        ValidationError: If a value fails normalisation.
    """

    for name in ("owner", "tap"):
        if getattr(args, name) is None:
            raise ValueError(f"{INPUT_FLAGS[name]} is required")

    provided = {
        name: getattr(args, name) for name in INPUT_FLAGS if getattr(args, name) is not None
    }
    return TapInputs.model_validate(provided)


def _resume_conflicts(args: argparse.Namespace) -> list[str]:
    return [flag for name, flag in INPUT_FLAGS.items() if getattr(args, name) is not None]


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = TapSetupSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    store = StateStore(settings.state_dir)

    if args.resume is not None:
        conflicts = _resume_conflicts(args)
        if conflicts:
            print(
                f"Inputs cannot be changed when resuming (got {', '.join(conflicts)})",
                file=sys.stderr,
            )
            return 2
    else:
        try:
            inputs = inputs_from_args(args)
        except (ValueError, ValidationError) as e:
            print(f"Input error: {e}", file=sys.stderr)
            return 2

        for warning in inputs.naming_warnings():
            logger.warning(warning)
            print(warning, file=sys.stderr)

    commands = CommandRunner(timeout=settings.command_timeout)
    github = GitHubClient(
        token=settings.github_token, base_url=settings.github_base_url, commands=commands
    )

    context: RunContext | None = None
    try:
        if args.resume is not None:
            context = RunContext.load(store, args.resume, dry_run=args.dry_run)
        else:
            context = RunContext.new(store, dry_run=args.dry_run, inputs=inputs)

        print(f"Run ID: {context.run_id}")
        print(f"State: {context.state_path}")

        runner = Runner(default_steps(commands=commands, github=github))
        runner.run(context)
        return 0

    except TapSetupError as e:
        if not isinstance(e, StepError):
            logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        if context is not None:
            print(
                f"Fix the problem, then resume with: homebrew-tap-setup --resume {context.run_id}",
                file=sys.stderr,
            )
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1

    finally:
        github.close()


if __name__ == "__main__":
    raise SystemExit(main())
