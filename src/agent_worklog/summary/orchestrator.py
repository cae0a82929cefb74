"""Build summary prompts from the work log and delegate the writing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import SummaryGenerationFailed
from ..storage import WorkEntry, WorklogQueries, WorklogQuery
from .generator import TextGenerator

logger = logging.getLogger(__name__)

SUMMARY_ENTRY_CAP = 500
NO_ENTRIES_MESSAGE = "No work entries found for the specified time period."


class SummaryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    days_back: int = Field(default=7, alias="daysBack", ge=1)
    category: str | None = None
    project_name: str | None = Field(default=None, alias="projectName")

    @field_validator("category", "project_name", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any):
        if isinstance(value, str) and not value.strip():
            return None
        return value


@dataclass(slots=True)
class SummaryResult:
    summary: str
    entry_count: int
    days_back: int

    def to_dict(self) -> dict[str, Any]:
        return {"summary": self.summary, "entriesCount": self.entry_count, "daysBack": self.days_back}


def _entry_date(timestamp: str) -> str:
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp[:10]
    return moment.astimezone().strftime("%x")


def format_entries(entries: Iterable[WorkEntry]) -> str:
    lines = []
    for entry in entries:
        project = f" ({entry.project_name})" if entry.project_name else ""
        category = f" [{entry.category}]" if entry.category else ""
        lines.append(f"- {_entry_date(entry.timestamp)}{project}{category}: {entry.description}")
    return "\n".join(lines)


def build_prompt(request: SummaryRequest, entries: list[WorkEntry]) -> str:
    filters = []
    if request.category:
        filters.append(f'category "{request.category}"')
    if request.project_name:
        filters.append(f'project "{request.project_name}"')
    filter_note = f" (filtered by {' and '.join(filters)})" if filters else ""

    return f"""You are analyzing a work log from an AI agent. Provide a concise summary of the work completed in the last {request.days_back} days{filter_note}.

Work entries:
{format_entries(entries)}

Structure your response in two parts separated by "---" on its own line:

1. FIRST: A brief 1-2 sentence overview (no title/heading, just the text)
2. THEN: "---" separator on its own line
3. FINALLY: Detailed breakdown with key accomplishments grouped by theme (no main title, just start with the content or subheadings)

IMPORTANT: Do NOT include any title like "Overview", "Summary", or "Work Summary" at the start. Just start directly with the content.

Example format:
Completed 15 tasks focusing on authentication and API improvements. Major accomplishments include JWT implementation and database optimization.

---

**Authentication & Security**
- Implemented JWT with refresh tokens
- Added rate limiting

**Performance**
- Optimized database queries"""


class SummaryOrchestrator:
    """Fetch matching entries, prompt the generator and assemble its output.

    No retries: a generator failure surfaces as :class:`SummaryGenerationFailed`.
    """

    def __init__(self, queries: WorklogQueries, generator: TextGenerator) -> None:
        self._queries = queries
        self._generator = generator

    def summarize(self, request: SummaryRequest | None = None) -> SummaryResult:
        request = request or SummaryRequest()
        result = self._queries.query(
            WorklogQuery(
                days_back=request.days_back,
                category=request.category,
                project_name=request.project_name,
                limit=SUMMARY_ENTRY_CAP,
            )
        )
        if not result.entries:
            return SummaryResult(summary=NO_ENTRIES_MESSAGE, entry_count=0, days_back=request.days_back)

        prompt = build_prompt(request, result.entries)
        logger.debug("Summarizing %d entries (%d prompt chars)", len(result.entries), len(prompt))

        fragments: list[str] = []
        try:
            for fragment in self._generator.stream(prompt):
                fragments.append(fragment)
        except Exception as exc:
            raise SummaryGenerationFailed(f"Summary generation failed: {exc}") from exc

        return SummaryResult(
            summary="".join(fragments).strip(),
            entry_count=len(result.entries),
            days_back=request.days_back,
        )


__all__ = [
    "NO_ENTRIES_MESSAGE",
    "SUMMARY_ENTRY_CAP",
    "SummaryOrchestrator",
    "SummaryRequest",
    "SummaryResult",
    "build_prompt",
    "format_entries",
]
