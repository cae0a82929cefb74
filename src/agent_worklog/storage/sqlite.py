"""SQLite-backed persistence for work entries."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from ..errors import InvalidEntry, StoreUnavailable
from .models import NewWorkEntry, WorkEntry

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS work_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    timestamp TEXT NOT NULL,
    task_description TEXT NOT NULL,
    session_id TEXT,
    category TEXT,
    project_name TEXT,
    git_branch TEXT,
    working_directory TEXT,
    created_at INTEGER DEFAULT (strftime('%s', 'now'))
);
CREATE INDEX IF NOT EXISTS idx_timestamp ON work_entries (timestamp);
CREATE INDEX IF NOT EXISTS idx_session_id ON work_entries (session_id);
CREATE INDEX IF NOT EXISTS idx_category ON work_entries (category);
CREATE INDEX IF NOT EXISTS idx_project_name ON work_entries (project_name);
"""

INSERT_SQL = """
INSERT INTO work_entries (
    timestamp, task_description, session_id, category,
    project_name, git_branch, working_directory
) VALUES (?, ?, ?, ?, ?, ?, ?)
"""

BUSY_TIMEOUT_SECONDS = 5.0


def utc_timestamp(moment: datetime | None = None) -> str:
    """Render ``moment`` (default: now) as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def row_to_entry(row: sqlite3.Row) -> WorkEntry:
    return WorkEntry(
        id=row["id"],
        timestamp=row["timestamp"],
        description=row["task_description"],
        session_id=row["session_id"],
        category=row["category"],
        project_name=row["project_name"],
        git_branch=row["git_branch"],
        working_directory=row["working_directory"],
        created_at=row["created_at"],
    )


class EntryStore:
    """Own the work log database file, its schema and its indexes.

    Each operation opens its own connection and closes it when done; there is
    no long-lived connection. Concurrent writers from separate processes are
    serialized by SQLite's file lock.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def initialize(self) -> None:
        """Create the database file and schema on first use.

        The schema is applied only when the ``work_entries`` table is missing. The
        DDL is ``IF NOT EXISTS`` throughout, so two first-run processes racing on
        a new file both succeed.
        """

        with self.connect():
            pass

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Open a read-write connection, creating the file and schema if needed."""

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(self._path, timeout=BUSY_TIMEOUT_SECONDS)
        except (OSError, sqlite3.Error) as exc:
            raise StoreUnavailable(f"Failed to initialize database: {exc}") from exc

        connection.row_factory = sqlite3.Row
        try:
            try:
                if self._has_schema(connection):
                    logger.debug("Opened existing work log at %s", self._path)
                else:
                    connection.executescript(SCHEMA)
                    logger.debug("Created work log schema at %s", self._path)
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"Failed to initialize database: {exc}") from exc
            yield connection
            try:
                connection.commit()
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"Failed to log task: {exc}") from exc
        finally:
            connection.close()

    def _has_schema(self, connection: sqlite3.Connection) -> bool:
        row = connection.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'work_entries'"
        ).fetchone()
        return row is not None

    @contextmanager
    def connect_readonly(self) -> Iterator[sqlite3.Connection]:
        """Open a read-only connection. The caller must check :meth:`exists` first."""

        uri = f"{self._path.resolve().as_uri()}?mode=ro"
        try:
            connection = sqlite3.connect(uri, uri=True, timeout=BUSY_TIMEOUT_SECONDS)
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Failed to open database: {exc}") from exc

        connection.row_factory = sqlite3.Row
        try:
            yield connection
        finally:
            connection.close()

    def append(self, entry: NewWorkEntry) -> int:
        """Insert one entry and return the id assigned by the store."""

        if not entry.description or not entry.description.strip():
            raise InvalidEntry("Task description must not be empty")
        if not entry.working_directory or not entry.working_directory.strip():
            raise InvalidEntry("Working directory must not be empty")

        with self.connect() as connection:
            try:
                cursor = connection.execute(
                    INSERT_SQL,
                    (
                        entry.timestamp,
                        entry.description,
                        entry.session_id,
                        entry.category,
                        entry.project_name,
                        entry.git_branch,
                        entry.working_directory,
                    ),
                )
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"Failed to log task: {exc}") from exc
            entry_id = cursor.lastrowid

        logger.debug("Appended work entry %s", entry_id)
        return int(entry_id)

    def get(self, entry_id: int) -> WorkEntry | None:
        if not self.exists():
            return None
        with self.connect_readonly() as connection:
            try:
                row = connection.execute(
                    "SELECT * FROM work_entries WHERE id = ?", (entry_id,)
                ).fetchone()
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"Failed to read database: {exc}") from exc
        return row_to_entry(row) if row is not None else None


__all__ = ["EntryStore", "row_to_entry", "utc_timestamp"]
