"""GitHub API client wrapper.

This intentionally wraps PyGithub to keep API calls out of step code and make
tests easy. Only read-only repository lookups are needed; repository creation
goes through `gh repo create` so the local tap is pushed in the same command.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from github import Auth, Github, GithubException, UnknownObjectException

from homebrew_tap_setup.commands import CommandRunner, require_success
from homebrew_tap_setup.workflow.errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RepositoryInfo:
    """Minimal repository metadata fetched from GitHub."""

    full_name: str
    ssh_url: str
    html_url: str
    clone_url: str

    def matches_remote(self, remote_url: str) -> bool:
        """True when a git remote URL points at this repository."""

        candidates = {self.ssh_url, self.html_url, f"{self.html_url}.git", self.clone_url}
        return remote_url.strip() in candidates


class GitHubClient:
    """Small wrapper around PyGithub for repository lookups.

    The token is resolved lazily. Without an explicit token the client asks the
    GitHub CLI (`gh auth token`), which the preflight step requires anyway.
    """

    def __init__(
        self,
        *,
        token: str | None = None,
        base_url: str = "https://api.github.com",
        commands: CommandRunner | None = None,
        github_api: Github | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._commands = commands or CommandRunner()
        self._gh = github_api

    def _api(self) -> Github:
        if self._gh is None:
            token = self._token or self._token_from_gh_cli()
            self._gh = Github(auth=Auth.Token(token), base_url=self._base_url)
            logger.debug("GitHub client initialised", extra={"base_url": self._base_url})
        return self._gh

    def _token_from_gh_cli(self) -> str:
        result = require_success(self._commands.capture(["gh", "auth", "token"]), "gh auth token")
        token = result.stdout.strip()
        if not token:
            raise CommandError("gh auth token returned empty output; run 'gh auth login'")
        return token

    def get_repository(self, slug: str) -> RepositoryInfo | None:
        """Fetch repository metadata, or None if the repository does not exist."""

        try:
            repo = self._api().get_repo(slug)
        except UnknownObjectException:
            logger.debug("Repository not found", extra={"repository": slug})
            return None
        except GithubException as e:
            raise CommandError(f"GitHub repository lookup failed for {slug}: {e}") from e

        return RepositoryInfo(
            full_name=repo.full_name,
            ssh_url=repo.ssh_url,
            html_url=repo.html_url,
            clone_url=repo.clone_url,
        )

    def close(self) -> None:
        if self._gh is not None:
            self._gh.close()
