from __future__ import annotations

import itertools
import logging
from pathlib import Path

import pytest

from kartlab.errors import PersistenceError
from kartlab.io import JsonFileStore, MemoryStore
from kartlab.search import SearchHistory


class _BrokenStore:
    def load(self):
        raise PersistenceError("unreadable")

    def save(self, items):
        raise PersistenceError("read-only")


def _clock():
    counter = itertools.count(1_000)
    return lambda: next(counter)


def test_record_keeps_most_recent_first_and_deduplicates() -> None:
    history = SearchHistory(clock=_clock())

    history.record("mario", 2)
    history.record("peach", 1)
    history.record("mario", 3)

    assert [item.query for item in history.items] == ["mario", "peach"]
    assert history.items[0].result_count == 3
    assert history.items[0].timestamp > history.items[1].timestamp


def test_empty_results_and_blank_queries_are_not_recorded() -> None:
    history = SearchHistory()

    assert history.record("zzz", 0) is False
    assert history.record("  ", 4) is False
    assert len(history) == 0


def test_history_is_capped() -> None:
    history = SearchHistory(limit=10, clock=_clock())

    for index in range(12):
        history.record(f"query {index}", 1)

    assert len(history) == 10
    assert history.items[0].query == "query 11"
    assert history.items[-1].query == "query 2"


def test_remove_and_clear() -> None:
    store = MemoryStore()
    history = SearchHistory(store, clock=_clock())
    history.record("mario", 1)
    history.record("luigi", 1)

    assert history.remove("mario") is True
    assert history.remove("mario") is False
    assert [item["query"] for item in store.load()] == ["luigi"]

    history.clear()
    assert history.items == ()
    assert store.load() == []


def test_history_round_trips_through_json_file(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "history.json")
    SearchHistory(store, clock=_clock()).record("bowser", 1)

    restored = SearchHistory(store)
    restored.load()

    assert [(item.query, item.result_count) for item in restored.items] == [("bowser", 1)]
    assert restored.session_only is False


def test_store_failures_degrade_to_session_only(caplog: pytest.LogCaptureFixture) -> None:
    history = SearchHistory(_BrokenStore())

    with caplog.at_level(logging.WARNING, logger="kartlab"):
        history.load()
        assert history.record("yoshi", 1) is True

    assert history.session_only is True
    assert [item.query for item in history.items] == ["yoshi"]
    events = [record.event for record in caplog.records]
    assert events == ["search.history_persistence_failed"] * 2


def test_limit_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SearchHistory(limit=0)


def test_load_skips_malformed_entries_and_duplicates(caplog: pytest.LogCaptureFixture) -> None:
    store = MemoryStore(
        [
            {"query": "mario", "timestamp": 3, "resultCount": 2},
            {"timestamp": 2},
            {"query": "mario", "timestamp": 1, "resultCount": 5},
            {"query": "luigi", "timestamp": 1, "resultCount": 1},
        ]
    )
    history = SearchHistory(store)

    with caplog.at_level(logging.WARNING, logger="kartlab"):
        history.load()

    assert [(item.query, item.result_count) for item in history.items] == [("mario", 2), ("luigi", 1)]
    assert [record.event for record in caplog.records] == ["search.history_skipped"]
