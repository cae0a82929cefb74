from __future__ import annotations

from pathlib import Path

import pytest

from agent_worklog.config import get_settings
from agent_worklog.storage import EntryStore, NewWorkEntry


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("AW_CONFIG_DIR", str(tmp_path / "aw"))
    for variable in ("CLAUDE_SESSION_ID", "AW_SESSION_ID", "AW_LOG_LEVEL", "AW_WEB_PORT"):
        monkeypatch.delenv(variable, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store(tmp_path: Path) -> EntryStore:
    return EntryStore(tmp_path / "aw" / "worklog.db")


def _make_entry(
    description: str,
    *,
    timestamp: str = "2025-01-01T12:00:00.000Z",
    category: str | None = None,
    project_name: str | None = "demo",
    session_id: str | None = None,
) -> NewWorkEntry:
    return NewWorkEntry(
        timestamp=timestamp,
        description=description,
        working_directory="/work/demo",
        session_id=session_id,
        category=category,
        project_name=project_name,
        git_branch="main",
    )


@pytest.fixture
def make_entry():
    return _make_entry
