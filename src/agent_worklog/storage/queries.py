"""Read-side access to the work log: filtered pages, distinct values, recent entries."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from ..errors import StoreUnavailable
from .models import WorkEntry, WorklogQuery, WorklogResult
from .sqlite import EntryStore, row_to_entry, utc_timestamp

logger = logging.getLogger(__name__)


class WorklogQueries:
    """Compose filters over the entry store into ordered, paginated results.

    A database file that does not exist yet reads as empty. A file that exists
    but cannot be read raises :class:`StoreUnavailable`.
    """

    def __init__(
        self,
        store: EntryStore,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def cutoff(self, days_back: int) -> str:
        """Return the earliest timestamp inside a window of ``days_back`` days ending now."""

        return utc_timestamp(self._clock() - timedelta(days=days_back))

    def _where(self, filters: WorklogQuery) -> tuple[str, list[Any]]:
        conditions: list[str] = []
        params: list[Any] = []
        if filters.category:
            conditions.append("category = ?")
            params.append(filters.category)
        if filters.project_name:
            conditions.append("project_name = ?")
            params.append(filters.project_name)
        if filters.session_id:
            conditions.append("session_id = ?")
            params.append(filters.session_id)
        if filters.days_back:
            conditions.append("timestamp >= ?")
            params.append(self.cutoff(filters.days_back))
        clause = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        return clause, params

    def _fetch(self, sql: str, params: list[Any]) -> list[sqlite3.Row]:
        with self._store.connect_readonly() as connection:
            try:
                return connection.execute(sql, params).fetchall()
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"Failed to read database: {exc}") from exc

    def query(self, filters: WorklogQuery | None = None) -> WorklogResult:
        filters = filters or WorklogQuery()
        if not self._store.exists():
            return WorklogResult(entries=[], total=0)

        where, params = self._where(filters)
        rows = self._fetch(
            f"SELECT * FROM work_entries{where} ORDER BY timestamp DESC, id DESC LIMIT ? OFFSET ?",
            [*params, filters.limit, filters.offset],
        )
        count_rows = self._fetch(f"SELECT COUNT(*) AS total FROM work_entries{where}", params)
        total = int(count_rows[0]["total"]) if count_rows else 0

        logger.debug("Query %s matched %d entries", filters.model_dump(exclude_none=True), total)
        return WorklogResult(entries=[row_to_entry(row) for row in rows], total=total)

    def _distinct(self, column: str) -> list[str]:
        if not self._store.exists():
            return []
        rows = self._fetch(
            f"SELECT DISTINCT {column} AS value FROM work_entries WHERE {column} IS NOT NULL ORDER BY value",
            [],
        )
        return [row["value"] for row in rows]

    def distinct_categories(self) -> list[str]:
        return self._distinct("category")

    def distinct_projects(self) -> list[str]:
        return self._distinct("project_name")

    def recent(self, days_back: int = 7, limit: int = 100) -> list[WorkEntry]:
        """Entries inside the last ``days_back`` days, most recent first."""

        return self.query(WorklogQuery(days_back=days_back, limit=limit)).entries


__all__ = ["WorklogQueries"]
