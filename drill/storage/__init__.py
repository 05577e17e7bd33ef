"""
Storage backends for adaptive statistics.

- StatsStorage: the contract the selector depends on
- MemoryStorage: ephemeral dict-backed store (tests)
- SQLiteStorage: durable per-profile key-value store
"""

from .base import StatsStorage
from .memory import MemoryStorage
from .sqlite_store import SQLiteStorage

__all__ = [
    "StatsStorage",
    "MemoryStorage",
    "SQLiteStorage",
]
