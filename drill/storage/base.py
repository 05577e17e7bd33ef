"""
Storage contract for the adaptive selector.

The selector reads and writes per-item statistics and a single
"last selected" slot through this interface. Implementations are chosen by
the caller and injected at construction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from drill.adaptive.models import ItemStats


class StatsStorage(ABC):
    """Per-item statistics plus the last-selected item id."""

    @abstractmethod
    def get_stats(self, item_id: str) -> ItemStats | None:
        """Return stored stats, or None if the item has no (valid) record."""

    @abstractmethod
    def save_stats(self, item_id: str, stats: ItemStats) -> None:
        """Create or replace the record for an item."""

    @abstractmethod
    def get_last_selected(self) -> str | None:
        ...

    @abstractmethod
    def set_last_selected(self, item_id: str) -> None:
        ...

    def preload(self, item_ids: Iterable[str]) -> None:
        """Hint that these items are about to be read. No-op by default."""
        return None
