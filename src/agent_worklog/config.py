"""Configuration management for Agent Work Log."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DB_FILENAME = "worklog.db"
SESSION_FALLBACK_ENV_VAR = "AW_SESSION_ID"


class WorklogSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    config_dir: Path = Field(default=Path("~/.aw"), validation_alias="AW_CONFIG_DIR")
    log_level: str = Field(default="WARNING", validation_alias="AW_LOG_LEVEL")
    webapp_url: str = Field(
        default="https://agent-worklog.vercel.app", validation_alias="AW_WEBAPP_URL"
    )
    web_port: int = Field(default=24377, validation_alias="AW_WEB_PORT")
    summary_model: str = Field(default="claude-sonnet-4-5", validation_alias="AW_SUMMARY_MODEL")
    summary_max_tokens: int = Field(default=2048, validation_alias="AW_SUMMARY_MAX_TOKENS")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError("AW_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG")
        return normalized

    @field_validator("config_dir", mode="before")
    @classmethod
    def _default_blank_config_dir(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return Path("~/.aw")
        return value

    @field_validator("web_port")
    @classmethod
    def _validate_port(cls, value: int) -> int:
        if not 0 <= value <= 65535:
            raise ValueError("AW_WEB_PORT must be between 0 and 65535")
        return value

    @field_validator("summary_max_tokens")
    @classmethod
    def _validate_max_tokens(cls, value: int) -> int:
        if value < 1:
            raise ValueError("AW_SUMMARY_MAX_TOKENS must be >= 1")
        return value

    @property
    def db_path(self) -> Path:
        return self.config_dir / DB_FILENAME


@lru_cache(maxsize=1)
def get_settings() -> WorklogSettings:
    """Return cached settings instance."""

    settings = WorklogSettings()
    settings.config_dir = settings.config_dir.expanduser().resolve()
    return settings


__all__ = ["DB_FILENAME", "SESSION_FALLBACK_ENV_VAR", "WorklogSettings", "get_settings"]
