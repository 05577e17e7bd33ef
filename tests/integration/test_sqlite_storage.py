"""
Integration tests for SQLiteStorage.

Uses a temporary database file per test.
"""

import json

import pytest

from drill.adaptive import AdaptiveSelector, ItemStats
from drill.storage import SQLiteStorage, StatsStorage


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "profile" / "state.db"


@pytest.fixture
def store(db_path):
    storage = SQLiteStorage(db_path, namespace="notes")
    yield storage
    storage.close()


def sample_stats() -> ItemStats:
    return ItemStats(
        ewma=1700,
        last_seen=1_700_000_000_000,
        recent_times=[2000, 1000],
        sample_count=2,
        stability=12.0,
        last_correct_at=1_700_000_000_000,
    )


class TestSQLiteStorage:
    def test_is_a_stats_storage(self, store):
        assert isinstance(store, StatsStorage)

    def test_creates_parent_directory(self, store, db_path):
        assert db_path.exists()

    def test_missing_item_is_none(self, store):
        assert store.get_stats("nope") is None

    def test_save_and_get(self, store):
        store.save_stats("C", sample_stats())
        assert store.get_stats("C") == sample_stats()

    def test_persists_across_connections(self, store, db_path):
        store.save_stats("C", sample_stats())
        store.set_last_selected("C")
        store.close()

        with SQLiteStorage(db_path, namespace="notes") as reopened:
            assert reopened.get_stats("C") == sample_stats()
            assert reopened.get_last_selected() == "C"

    def test_stored_as_camel_case_json(self, store):
        store.save_stats("C", sample_stats())
        row = store.conn.execute("SELECT value FROM kv WHERE key = ?", ("adaptive_notes_C",)).fetchone()
        assert json.loads(row["value"])["sampleCount"] == 2

    def test_namespaces_are_isolated(self, store, db_path):
        store.save_stats("C", sample_stats())
        store.set_last_selected("C")
        with SQLiteStorage(db_path, namespace="chords") as other:
            assert other.get_stats("C") is None
            assert other.get_last_selected() is None

    def test_last_selected_roundtrip(self, store):
        assert store.get_last_selected() is None
        store.set_last_selected("E")
        store.set_last_selected("G")
        assert store.get_last_selected() == "G"

    def test_malformed_json_treated_as_absent(self, store):
        store._set_value("adaptive_notes_bad", "{not json")
        assert store.get_stats("bad") is None

    def test_invalid_record_treated_as_absent(self, store):
        store._set_value("adaptive_notes_bad", json.dumps({"ewma": "slow"}))
        assert store.get_stats("bad") is None

    def test_non_object_record_treated_as_absent(self, store):
        store._set_value("adaptive_notes_bad", json.dumps([1, 2, 3]))
        assert store.get_stats("bad") is None

    def test_preload_warms_cache(self, store):
        store.save_stats("C", sample_stats())
        fresh = SQLiteStorage(store.db_path, namespace="notes")
        fresh.preload(["C", "D"])
        # Rows changed behind the cache are not re-read
        store._set_value("adaptive_notes_C", "{corrupt")
        assert fresh.get_stats("C") == sample_stats()
        assert fresh.get_stats("D") is None
        fresh.close()


class TestSelectorOnSQLite:
    def test_selector_state_survives_restart(self, db_path):
        now = [1_700_000_000_000]
        with SQLiteStorage(db_path, namespace="notes") as storage:
            selector = AdaptiveSelector(storage, clock=lambda: now[0], rand=lambda: 0.0)
            selector.record_response("x", 2000)
            selector.record_response("x", 1000)
            selector.select_next(["x", "y"])

        with SQLiteStorage(db_path, namespace="notes") as storage:
            selector = AdaptiveSelector(storage, clock=lambda: now[0], rand=lambda: 0.0)
            stats = selector.get_stats("x")
            assert stats.ewma == pytest.approx(1700)
            assert stats.sample_count == 2
            assert storage.get_last_selected() == "x"
            assert selector.check_all_mastered(["x"]) is True
