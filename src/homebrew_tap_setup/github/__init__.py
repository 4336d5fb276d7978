"""GitHub integration."""

from homebrew_tap_setup.github.client import GitHubClient, RepositoryInfo

__all__ = ["GitHubClient", "RepositoryInfo"]
