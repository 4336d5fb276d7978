"""Unit tests for the GitHub client wrapper (mocked)."""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from github import Github, GithubException, UnknownObjectException

from homebrew_tap_setup.commands import CommandResult, CommandRunner
from homebrew_tap_setup.github import client as client_module
from homebrew_tap_setup.github.client import GitHubClient, RepositoryInfo
from homebrew_tap_setup.workflow.errors import CommandError


def _repo() -> Mock:
    repo = Mock()
    repo.full_name = "octo-org/homebrew-tools"
    repo.ssh_url = "git@github.com:octo-org/homebrew-tools.git"
    repo.html_url = "https://github.com/octo-org/homebrew-tools"
    repo.clone_url = "https://github.com/octo-org/homebrew-tools.git"
    return repo


def test_get_repository_returns_metadata() -> None:
    api = Mock(spec=Github)
    api.get_repo.return_value = _repo()
    client = GitHubClient(github_api=api)

    info = client.get_repository("octo-org/homebrew-tools")

    api.get_repo.assert_called_once_with("octo-org/homebrew-tools")
    assert info == RepositoryInfo(
        full_name="octo-org/homebrew-tools",
        ssh_url="git@github.com:octo-org/homebrew-tools.git",
        html_url="https://github.com/octo-org/homebrew-tools",
        clone_url="https://github.com/octo-org/homebrew-tools.git",
    )


def test_get_repository_missing_returns_none() -> None:
    api = Mock(spec=Github)
    api.get_repo.side_effect = UnknownObjectException(404, {"message": "Not Found"}, None)
    client = GitHubClient(github_api=api)

    assert client.get_repository("octo-org/missing") is None


def test_get_repository_api_error_raises_command_error() -> None:
    api = Mock(spec=Github)
    api.get_repo.side_effect = GithubException(500, {"message": "Server Error"}, None)
    client = GitHubClient(github_api=api)

    with pytest.raises(CommandError, match="GitHub repository lookup failed"):
        client.get_repository("octo-org/homebrew-tools")


def test_token_is_taken_from_gh_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    commands = Mock(spec=CommandRunner)
    commands.capture.return_value = CommandResult(
        args=("gh", "auth", "token"), returncode=0, stdout="gho_secret\n"
    )
    github_cls = Mock()
    github_cls.return_value.get_repo.return_value = _repo()
    monkeypatch.setattr(client_module, "Github", github_cls)

    client = GitHubClient(commands=commands, base_url="https://ghe.example.com/api/v3/")
    client.get_repository("octo-org/homebrew-tools")

    commands.capture.assert_called_once_with(["gh", "auth", "token"])
    _, kwargs = github_cls.call_args
    assert kwargs["base_url"] == "https://ghe.example.com/api/v3"
    assert kwargs["auth"].token == "gho_secret"


def test_explicit_token_skips_gh_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    commands = Mock(spec=CommandRunner)
    github_cls = Mock()
    monkeypatch.setattr(client_module, "Github", github_cls)

    client = GitHubClient(token="explicit", commands=commands)
    client.get_repository("octo-org/homebrew-tools")

    commands.capture.assert_not_called()
    assert github_cls.call_args.kwargs["auth"].token == "explicit"


def test_empty_gh_token_is_an_error() -> None:
    commands = Mock(spec=CommandRunner)
    commands.capture.return_value = CommandResult(args=("gh", "auth", "token"), returncode=0)

    with pytest.raises(CommandError, match="gh auth login"):
        GitHubClient(commands=commands).get_repository("octo-org/homebrew-tools")


def test_close_only_when_initialised() -> None:
    GitHubClient().close()

    api = Mock(spec=Github)
    GitHubClient(github_api=api).close()
    api.close.assert_called_once_with()


@pytest.mark.parametrize(
    "remote",
    [
        "git@github.com:octo-org/homebrew-tools.git",
        "https://github.com/octo-org/homebrew-tools",
        "https://github.com/octo-org/homebrew-tools.git",
        "  git@github.com:octo-org/homebrew-tools.git\n",
    ],
)
def test_matches_remote_accepts_known_urls(remote: str) -> None:
    info = RepositoryInfo(
        full_name="octo-org/homebrew-tools",
        ssh_url="git@github.com:octo-org/homebrew-tools.git",
        html_url="https://github.com/octo-org/homebrew-tools",
        clone_url="https://github.com/octo-org/homebrew-tools.git",
    )

    assert info.matches_remote(remote)


def test_matches_remote_rejects_other_repository() -> None:
    info = RepositoryInfo(
        full_name="octo-org/homebrew-tools",
        ssh_url="git@github.com:octo-org/homebrew-tools.git",
        html_url="https://github.com/octo-org/homebrew-tools",
        clone_url="https://github.com/octo-org/homebrew-tools.git",
    )

    assert not info.matches_remote("git@github.com:someone/else.git")
