"""
SQLite key-value storage for adaptive statistics.

Durable, per-profile persistence for:
- ItemStats per item (JSON records)
- The last selected item id

Keys are namespaced so several practice modes can share one database:
    adaptive_{namespace}_{item_id}
    adaptive_{namespace}_lastSelected

Database location: ~/.drill/state.db
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterable
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from drill.adaptive.models import ItemStats

from .base import StatsStorage

# SQLite's default limit on bound parameters is 999 on older builds
_PRELOAD_CHUNK = 500


class SQLiteStorage(StatsStorage):
    """
    SQLite-backed statistics store with a read-through cache.

    Malformed records are logged and treated as absent, so a corrupted row
    behaves like an item that was never seen.
    """

    DEFAULT_DB_PATH = Path.home() / ".drill" / "state.db"

    def __init__(self, db_path: Path | str | None = None, namespace: str = "default"):
        """
        Initialize the store.

        Args:
            db_path: Database path (defaults to ~/.drill/state.db)
            namespace: Key prefix isolating one practice mode's records
        """
        self.db_path = Path(db_path) if db_path is not None else self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.namespace = namespace

        self._conn: sqlite3.Connection | None = None
        self._cache: dict[str, ItemStats | None] = {}
        self._init_schema()

        logger.info(f"SQLiteStorage initialized at {self.db_path} (namespace={namespace})")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        self.conn.commit()

    # =========================================================================
    # Keys
    # =========================================================================

    def _stats_key(self, item_id: str) -> str:
        return f"adaptive_{self.namespace}_{item_id}"

    @property
    def _last_selected_key(self) -> str:
        return f"adaptive_{self.namespace}_lastSelected"

    # =========================================================================
    # Raw Key-Value Operations
    # =========================================================================

    def _get_value(self, key: str) -> str | None:
        cursor = self.conn.cursor()
        cursor.execute("SELECT value FROM kv WHERE key = ?", (key,))
        row = cursor.fetchone()
        return None if row is None else row["value"]

    def _set_value(self, key: str, value: str) -> None:
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO kv (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
        """,
            (key, value),
        )
        self.conn.commit()

    def _decode(self, key: str, raw: str | None) -> ItemStats | None:
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            return ItemStats.from_dict(data)
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.warning(f"Ignoring malformed stats record {key}: {e}")
            return None

    # =========================================================================
    # StatsStorage
    # =========================================================================

    def get_stats(self, item_id: str) -> ItemStats | None:
        key = self._stats_key(item_id)
        if key not in self._cache:
            self._cache[key] = self._decode(key, self._get_value(key))
        return self._cache[key]

    def save_stats(self, item_id: str, stats: ItemStats) -> None:
        key = self._stats_key(item_id)
        self._set_value(key, json.dumps(stats.to_dict()))
        self._cache[key] = stats

    def get_last_selected(self) -> str | None:
        return self._get_value(self._last_selected_key)

    def set_last_selected(self, item_id: str) -> None:
        self._set_value(self._last_selected_key, item_id)

    def preload(self, item_ids: Iterable[str]) -> None:
        """Warm the cache for the given items with batched queries."""
        keys = [self._stats_key(i) for i in item_ids]
        keys = [k for k in keys if k not in self._cache]

        cursor = self.conn.cursor()
        for start in range(0, len(keys), _PRELOAD_CHUNK):
            chunk = keys[start : start + _PRELOAD_CHUNK]
            placeholders = ",".join("?" for _ in chunk)
            cursor.execute(f"SELECT key, value FROM kv WHERE key IN ({placeholders})", chunk)
            found = {row["key"]: row["value"] for row in cursor.fetchall()}
            for key in chunk:
                self._cache[key] = self._decode(key, found.get(key))

        logger.debug(f"Preloaded {len(keys)} stats records")

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> SQLiteStorage:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
