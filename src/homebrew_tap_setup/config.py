"""Configuration for homebrew-tap-setup.

Settings come from the process environment, then from a `.env` file in the
working directory. Run snapshots live under `$XDG_CONFIG_HOME/homebrew-tap-setup`
unless `TAP_SETUP_STATE_DIR` points elsewhere.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "homebrew-tap-setup"


def default_state_dir() -> Path:
    """`$XDG_CONFIG_HOME/homebrew-tap-setup`, falling back to `~/.config`."""

    config_home = os.environ.get("XDG_CONFIG_HOME", "").strip()
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / APP_NAME


class TapSetupSettings(BaseSettings):
    """Settings for the tap setup tool.

    Environment variables:
    - TAP_SETUP_STATE_DIR        (optional)
    - LOG_LEVEL                  (optional)
    - TAP_SETUP_GITHUB_TOKEN     (optional, defaults to `gh auth token`)
    - GITHUB_BASE_URL            (optional)
    - TAP_SETUP_COMMAND_TIMEOUT  (optional, seconds)
    """

    state_dir: Path = Field(
        default_factory=default_state_dir,
        validation_alias="TAP_SETUP_STATE_DIR",
        description="Directory where run snapshots are persisted",
    )

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    github_token: str | None = Field(
        default=None,
        validation_alias="TAP_SETUP_GITHUB_TOKEN",
        description="GitHub token for repository lookups (falls back to `gh auth token`)",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    command_timeout: float | None = Field(
        default=None,
        validation_alias="TAP_SETUP_COMMAND_TIMEOUT",
        description="Timeout in seconds for each external command (unset means no timeout)",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("command_timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("TAP_SETUP_COMMAND_TIMEOUT must be positive")
        return value
