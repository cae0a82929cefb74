from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from agent_worklog.errors import StoreUnavailable
from agent_worklog.storage import EntryStore, WorklogQueries, WorklogQuery, utc_timestamp

NOW = datetime(2025, 1, 10, 12, 0, 0, tzinfo=timezone.utc)


def _queries(store: EntryStore) -> WorklogQueries:
    return WorklogQueries(store, clock=lambda: NOW)


def _ago(**delta) -> str:
    return utc_timestamp(NOW - timedelta(**delta))


def test_category_filter_returns_newest_first(store: EntryStore, make_entry) -> None:
    store.append(make_entry("Task 1", category="feature", timestamp=_ago(minutes=3)))
    store.append(make_entry("Task 2", category="bugfix", timestamp=_ago(minutes=2)))
    store.append(make_entry("Task 3", category="feature", timestamp=_ago(minutes=1)))

    result = _queries(store).query(WorklogQuery(category="feature"))

    assert [entry.description for entry in result.entries] == ["Task 3", "Task 1"]
    assert result.total == 2


def test_filters_are_combined_with_and(store: EntryStore, make_entry) -> None:
    store.append(make_entry("a1", category="A", project_name="P"))
    store.append(make_entry("a2", category="A", project_name="P"))
    store.append(make_entry("b1", category="B", project_name="Q"))
    queries = _queries(store)

    only_a = queries.query(WorklogQuery(category="A"))
    assert sorted(entry.description for entry in only_a.entries) == ["a1", "a2"]

    none = queries.query(WorklogQuery(category="A", project_name="Q"))
    assert none.entries == []
    assert none.total == 0


def test_session_filter(store: EntryStore, make_entry) -> None:
    store.append(make_entry("in session", session_id="sess-1"))
    store.append(make_entry("elsewhere", session_id="sess-2"))
    store.append(make_entry("no session"))

    result = _queries(store).query(WorklogQuery(session_id="sess-1"))

    assert [entry.description for entry in result.entries] == ["in session"]


def test_total_counts_matches_before_pagination(store: EntryStore, make_entry) -> None:
    for minute in range(5):
        store.append(make_entry(f"entry {minute}", timestamp=_ago(minutes=10 - minute)))

    page = _queries(store).query(WorklogQuery(limit=2, offset=1))

    assert [entry.description for entry in page.entries] == ["entry 3", "entry 2"]
    assert page.total == 5


def test_equal_timestamps_fall_back_to_insertion_order(store: EntryStore, make_entry) -> None:
    store.append(make_entry("first"))
    store.append(make_entry("second"))

    result = _queries(store).query()

    assert [entry.description for entry in result.entries] == ["second", "first"]


def test_days_back_window_boundaries(store: EntryStore, make_entry) -> None:
    days = 7
    store.append(make_entry("too old", timestamp=_ago(days=days + 1)))
    store.append(make_entry("inside", timestamp=_ago(days=days - 1)))

    result = _queries(store).query(WorklogQuery(days_back=days))

    assert [entry.description for entry in result.entries] == ["inside"]
    assert result.total == 1


def test_days_back_is_evaluated_against_the_current_clock(store: EntryStore, make_entry) -> None:
    store.append(make_entry("two days old", timestamp=_ago(days=2)))
    current = {"now": NOW}
    queries = WorklogQueries(store, clock=lambda: current["now"])

    assert queries.query(WorklogQuery(days_back=3)).total == 1
    current["now"] = NOW + timedelta(days=2)
    assert queries.query(WorklogQuery(days_back=3)).total == 0


def test_recent_uses_window_and_limit(store: EntryStore, make_entry) -> None:
    store.append(make_entry("old", timestamp=_ago(days=30)))
    for hour in range(3):
        store.append(make_entry(f"recent {hour}", timestamp=_ago(hours=hour + 1)))

    entries = _queries(store).recent(days_back=7, limit=2)

    assert [entry.description for entry in entries] == ["recent 0", "recent 1"]


def test_distinct_values_skip_nulls(store: EntryStore, make_entry) -> None:
    store.append(make_entry("x", category="feature", project_name="alpha"))
    store.append(make_entry("y", category="feature", project_name="beta"))
    store.append(make_entry("z", category=None, project_name=None))
    queries = _queries(store)

    assert queries.distinct_categories() == ["feature"]
    assert sorted(queries.distinct_projects()) == ["alpha", "beta"]


def test_missing_database_reads_as_empty(store: EntryStore) -> None:
    queries = _queries(store)

    result = queries.query()

    assert result.entries == []
    assert result.total == 0
    assert queries.distinct_categories() == []
    assert queries.distinct_projects() == []
    assert not store.path.exists()


def test_initialized_empty_database_reads_as_empty(store: EntryStore) -> None:
    store.initialize()

    result = _queries(store).query()

    assert store.path.exists()
    assert (result.entries, result.total) == ([], 0)


def test_corrupt_database_raises(tmp_path: Path) -> None:
    path = tmp_path / "worklog.db"
    path.write_bytes(b"this is not a sqlite database" * 100)

    with pytest.raises(StoreUnavailable):
        _queries(EntryStore(path)).query()


def test_query_model_accepts_http_style_parameters() -> None:
    filters = WorklogQuery.model_validate(
        {"limit": "10", "offset": "5", "projectName": "demo", "sessionId": "", "daysBack": "3", "token": "x"}
    )

    assert filters.limit == 10
    assert filters.offset == 5
    assert filters.project_name == "demo"
    assert filters.session_id is None
    assert filters.days_back == 3


@pytest.mark.parametrize("days_back", [0, "0", ""])
def test_zero_days_back_means_no_window(store: EntryStore, make_entry, days_back) -> None:
    store.append(make_entry("ancient", timestamp=_ago(days=400)))
    store.append(make_entry("fresh", timestamp=_ago(hours=1)))

    filters = WorklogQuery.model_validate({"daysBack": days_back})
    result = _queries(store).query(filters)

    assert filters.days_back is None
    assert [entry.description for entry in result.entries] == ["fresh", "ancient"]
