from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from agent_worklog.harnesses import get_session_id, session_env_vars
from agent_worklog.metadata import GitClient, collect_metadata, repo_name_from_url


class StubGit:
    def __init__(self, remote: str | None = None, branch: str | None = None) -> None:
        self.remote = remote
        self.branch = branch
        self.calls: list[tuple[str, Path]] = []

    def remote_url(self, cwd: Path) -> str | None:
        self.calls.append(("remote", cwd))
        return self.remote

    def current_branch(self, cwd: Path) -> str | None:
        self.calls.append(("branch", cwd))
        return self.branch


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://github.com/acme/agent-worklog.git", "agent-worklog"),
        ("https://github.com/acme/agent-worklog", "agent-worklog"),
        ("git@github.com:acme/widgets.git", "widgets"),
        ("no-slashes-here", None),
    ],
)
def test_repo_name_from_url(url: str, expected: str | None) -> None:
    assert repo_name_from_url(url) == expected


def test_collect_uses_remote_name_and_branch(tmp_path: Path) -> None:
    git = StubGit(remote="https://example.com/team/service.git", branch="feature/x")

    metadata = collect_metadata(tmp_path, environ={}, git=git)

    assert metadata.project_name == "service"
    assert metadata.git_branch == "feature/x"
    assert metadata.working_directory == str(tmp_path)
    assert metadata.session_id is None


def test_collect_falls_back_to_directory_name(tmp_path: Path) -> None:
    project = tmp_path / "my-project"
    project.mkdir()

    metadata = collect_metadata(project, environ={}, git=StubGit())

    assert metadata.project_name == "my-project"
    assert metadata.git_branch is None


def test_session_id_prefers_tool_variable() -> None:
    environ = {"CLAUDE_SESSION_ID": "claude-1", "AW_SESSION_ID": "generic-1"}
    assert get_session_id(environ) == "claude-1"


def test_session_id_uses_generic_fallback_and_skips_empty_values() -> None:
    environ = {"CLAUDE_SESSION_ID": "", "AW_SESSION_ID": "generic-1"}
    assert get_session_id(environ) == "generic-1"
    assert get_session_id({}) is None


def test_session_env_var_order() -> None:
    assert session_env_vars() == ["CLAUDE_SESSION_ID", "AW_SESSION_ID"]


def test_collect_reads_session_from_process_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("AW_SESSION_ID", "from-env")
    assert collect_metadata(tmp_path, git=StubGit()).session_id == "from-env"


def test_git_client_without_executable_returns_none(tmp_path: Path) -> None:
    client = GitClient()
    client._executable = None

    assert client.remote_url(tmp_path) is None
    assert client.current_branch(tmp_path) is None


def test_git_client_swallows_missing_binary(tmp_path: Path) -> None:
    client = GitClient(executable=str(tmp_path / "missing-git"))

    assert client.remote_url(tmp_path) is None


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_git_client_outside_repository(tmp_path: Path) -> None:
    outside = tmp_path / "plain"
    outside.mkdir()
    (outside / ".git").write_text("gitdir: /nonexistent\n", encoding="utf-8")

    client = GitClient()

    assert client.remote_url(outside) is None
    assert client.current_branch(outside) is None
    assert collect_metadata(outside, environ={}, git=client).project_name == "plain"
