"""Add a formula to the tap.

Two modes:
- `stub`: write `Formula/<tap>.rb` from a template with TODO placeholders.
- `brew-create`: run `brew create` against a source URL with the editor
  disabled, so the command never blocks on an interactive session.

Produces the `formula_name` scratch field read by the final summary.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from homebrew_tap_setup.commands import CommandRunner
from homebrew_tap_setup.inputs import FormulaMode
from homebrew_tap_setup.workflow.context import RunContext
from homebrew_tap_setup.workflow.errors import EffectError, PreconditionError
from homebrew_tap_setup.workflow.step import Step, VerifyStatus

from ._common import tap_path

ARCHIVE_EXTENSIONS = (".tar.gz", ".tgz", ".tar.bz2", ".tar.xz", ".zip")

STUB_TEMPLATE = """\
class {class_name} < Formula
  desc "TODO: add a short description"
  homepage "https://example.com"
  url "https://example.com/TODO.tar.gz"
  sha256 "TODO"
  license "MIT"

  def install
    # TODO: install steps
  end

  test do
    # TODO: add a test
  end
end
"""

_NO_EDITOR_ENV = {"HOMEBREW_EDITOR": "/usr/bin/true", "EDITOR": "/usr/bin/true"}


def formula_class_name(tap: str) -> str:
    """`my-cool_tool` -> `MyCoolTool`."""

    parts = [part for part in re.split(r"[-_]", tap) if part]
    return "".join(part[0].upper() + part[1:] for part in parts)


def derive_name_from_url(url: str) -> str | None:
    """Best-effort formula name from a source archive URL.

    `https://host/foo-1.2.3.tar.gz?x=1` -> `foo`.
    """

    url = url.split("?", 1)[0].split("#", 1)[0]
    base = url.rsplit("/", 1)[-1]

    for ext in ARCHIVE_EXTENSIONS:
        if base.endswith(ext):
            base = base[: -len(ext)]
            break

    prefix, sep, suffix = base.rpartition("-")
    if sep and suffix and (suffix[0].isdigit() or suffix[0] == "v"):
        base = prefix

    return base or None


def collect_formula_names(formula_dir: Path) -> list[str]:
    if not formula_dir.is_dir():
        return []
    return sorted(p.stem for p in formula_dir.iterdir() if p.suffix == ".rb")


@dataclass(frozen=True, slots=True)
class AddFormulaStep(Step):
    step_id: ClassVar[str] = "add_formula"
    description: ClassVar[str] = "Add formula"

    commands: CommandRunner = field(default_factory=CommandRunner)

    @staticmethod
    def formula_dir(context: RunContext) -> Path:
        return tap_path(context) / "Formula"

    @classmethod
    def stub_formula_path(cls, context: RunContext) -> Path:
        return cls.formula_dir(context) / f"{context.inputs.tap}.rb"

    @staticmethod
    def _record_formula_name(context: RunContext, name: str) -> None:
        context.state.formula_name = name
        context.persist()

    def preflight(self, context: RunContext) -> None:
        path = tap_path(context)
        if not path.exists():
            raise PreconditionError(f"tap path does not exist: {path}")

        inputs = context.inputs
        if inputs.formula_mode == FormulaMode.BREW_CREATE and not inputs.formula_url:
            raise PreconditionError("formula-url is required for brew-create mode")

    def apply(self, context: RunContext) -> None:
        if context.inputs.formula_mode == FormulaMode.STUB:
            self._write_stub(context)
        else:
            self._brew_create(context)

    def _write_stub(self, context: RunContext) -> None:
        formula_dir = self.formula_dir(context)
        formula_dir.mkdir(parents=True, exist_ok=True)

        formula_path = self.stub_formula_path(context)
        if not formula_path.exists():
            class_name = formula_class_name(context.inputs.tap)
            formula_path.write_text(STUB_TEMPLATE.format(class_name=class_name), encoding="utf-8")

        self._record_formula_name(context, context.inputs.tap)

    def _brew_create(self, context: RunContext) -> None:
        inputs = context.inputs
        url = inputs.formula_url or ""
        name = inputs.formula_name or derive_name_from_url(url)
        if name is None:
            raise EffectError(
                "formula-name is required when the formula name cannot be derived from the URL"
            )

        print(f"    brew create --tap {inputs.repo_slug} {url}")
        code = self.commands.stream(
            ["brew", "create", "--tap", inputs.repo_slug, "--set-name", name, url],
            env=_NO_EDITOR_ENV,
        )
        if code != 0:
            raise EffectError(f"brew create returned non-zero status: {code}")

        names = collect_formula_names(self.formula_dir(context))
        self._record_formula_name(context, names[0] if len(names) == 1 else name)

    def verify(self, context: RunContext) -> VerifyStatus:
        if context.inputs.formula_mode == FormulaMode.STUB:
            present = self.stub_formula_path(context).exists()
        else:
            present = bool(collect_formula_names(self.formula_dir(context)))
        return VerifyStatus.COMPLETE if present else VerifyStatus.INCOMPLETE
