"""Storage abstractions for Agent Work Log."""

from .models import NewWorkEntry, WorkEntry, WorklogQuery, WorklogResult
from .queries import WorklogQueries
from .sqlite import EntryStore, utc_timestamp

__all__ = [
    "EntryStore",
    "NewWorkEntry",
    "WorkEntry",
    "WorklogQueries",
    "WorklogQuery",
    "WorklogResult",
    "utc_timestamp",
]
