"""Data models for persisted work entries and read-side queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(slots=True)
class NewWorkEntry:
    timestamp: str
    description: str
    working_directory: str
    session_id: str | None = None
    category: str | None = None
    project_name: str | None = None
    git_branch: str | None = None


@dataclass(slots=True)
class WorkEntry:
    """A stored work entry. Entries are never mutated after insertion."""

    id: int
    timestamp: str
    description: str
    session_id: str | None
    category: str | None
    project_name: str | None
    git_branch: str | None
    working_directory: str | None
    created_at: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "description": self.description,
            "sessionId": self.session_id,
            "category": self.category,
            "projectName": self.project_name,
            "gitBranch": self.git_branch,
            "workingDirectory": self.working_directory,
            "createdAt": self.created_at,
        }


@dataclass(slots=True)
class WorklogResult:
    entries: list[WorkEntry] = field(default_factory=list)
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"entries": [entry.to_dict() for entry in self.entries], "total": self.total}


class WorklogQuery(BaseModel):
    """Filters for a paginated work log read. All provided filters are ANDed."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    limit: int = Field(default=50, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)
    category: str | None = None
    project_name: str | None = Field(default=None, alias="projectName")
    session_id: str | None = Field(default=None, alias="sessionId")
    days_back: int | None = Field(default=None, alias="daysBack", ge=1)

    @field_validator("category", "project_name", "session_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("days_back", mode="before")
    @classmethod
    def _blank_days_to_none(cls, value: Any):
        # 0 means no time window
        if value in ("", "0", 0):
            return None
        return value


__all__ = ["NewWorkEntry", "WorkEntry", "WorklogQuery", "WorklogResult"]
