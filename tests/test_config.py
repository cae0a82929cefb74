from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from agent_worklog.config import WorklogSettings, get_settings


def test_defaults_point_at_home_directory(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AW_CONFIG_DIR", raising=False)
    settings = WorklogSettings(_env_file=None)

    assert settings.config_dir == Path("~/.aw")
    assert settings.log_level == "WARNING"
    assert settings.web_port == 24377


def test_config_dir_override_is_resolved(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AW_CONFIG_DIR", str(tmp_path / "custom"))
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.config_dir == (tmp_path / "custom").resolve()
    assert settings.db_path == (tmp_path / "custom").resolve() / "worklog.db"


def test_log_level_is_normalized(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AW_LOG_LEVEL", " debug ")
    assert WorklogSettings(_env_file=None).log_level == "DEBUG"


def test_invalid_log_level_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AW_LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        WorklogSettings(_env_file=None)


def test_invalid_port_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AW_WEB_PORT", "70000")
    with pytest.raises(ValidationError):
        WorklogSettings(_env_file=None)
