"""Domain configuration for a tap setup run.

The inputs are validated and normalised once, embedded in the run snapshot at
creation, and reused unchanged on every resume.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator

DEFAULT_REPO_PREFIX = "homebrew-"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class FormulaMode(str, Enum):
    STUB = "stub"
    BREW_CREATE = "brew-create"


_TOKEN_LABELS = {
    "owner": "owner",
    "tap": "tap",
    "repo_name": "repo name",
    "formula_name": "formula name",
}


def normalize_token(label: str, value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(f"{label} is required")
    if "/" in trimmed:
        raise ValueError(f"{label} must not include '/'")
    if any(ch.isspace() for ch in trimmed):
        raise ValueError(f"{label} must not contain whitespace")
    return trimmed


class TapInputs(BaseModel):
    """Normalised inputs describing the tap to create."""

    model_config = ConfigDict(frozen=True)

    owner: str
    tap: str
    repo_name: str
    visibility: Visibility = Visibility.PUBLIC
    branch: str = "main"
    formula_mode: FormulaMode = FormulaMode.STUB
    formula_url: str | None = None
    formula_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_repo_name(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if data.get("repo_name") is None and isinstance(data.get("tap"), str):
            data = {**data, "repo_name": f"{DEFAULT_REPO_PREFIX}{data['tap'].strip()}"}
        return data

    @field_validator("owner", "tap", "repo_name")
    @classmethod
    def _normalize_required_token(cls, value: str, info: ValidationInfo) -> str:
        return normalize_token(_TOKEN_LABELS[info.field_name], value)

    @field_validator("formula_name")
    @classmethod
    def _normalize_formula_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_token(_TOKEN_LABELS["formula_name"], value)

    @field_validator("branch")
    @classmethod
    def _normalize_branch(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("branch is required")
        return trimmed

    @field_validator("formula_url")
    @classmethod
    def _normalize_formula_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def _require_url_for_brew_create(self) -> TapInputs:
        if self.formula_mode == FormulaMode.BREW_CREATE and self.formula_url is None:
            raise ValueError("formula-url is required when formula-mode is brew-create")
        return self

    @property
    def repo_slug(self) -> str:
        return f"{self.owner}/{self.repo_name}"

    @property
    def uses_default_repo_name(self) -> bool:
        return self.repo_name == f"{DEFAULT_REPO_PREFIX}{self.tap}"

    @property
    def tap_name(self) -> str:
        """Identifier used with `brew tap` and `brew install`."""

        if self.uses_default_repo_name:
            return f"{self.owner}/{self.tap}"
        return self.repo_slug

    def naming_warnings(self) -> list[str]:
        warnings: list[str] = []
        if self.tap.startswith(DEFAULT_REPO_PREFIX):
            warnings.append(
                f"Warning: tap short name includes '{DEFAULT_REPO_PREFIX}'; "
                f"default repo would become '{DEFAULT_REPO_PREFIX}{self.tap}'."
            )
        if not self.uses_default_repo_name:
            warnings.append(
                "Note: repo name does not match homebrew-<short>; "
                f"'brew tap {self.owner}/{self.tap}' shorthand may not work."
            )
        return warnings
