"""In-memory storage, used by tests and throwaway sessions."""

from __future__ import annotations

from drill.adaptive.models import ItemStats

from .base import StatsStorage


class MemoryStorage(StatsStorage):
    """Dict-backed, ephemeral storage."""

    def __init__(self) -> None:
        self._stats: dict[str, ItemStats] = {}
        self._last_selected: str | None = None

    def get_stats(self, item_id: str) -> ItemStats | None:
        return self._stats.get(item_id)

    def save_stats(self, item_id: str, stats: ItemStats) -> None:
        self._stats[item_id] = stats

    def get_last_selected(self) -> str | None:
        return self._last_selected

    def set_last_selected(self, item_id: str) -> None:
        self._last_selected = item_id
