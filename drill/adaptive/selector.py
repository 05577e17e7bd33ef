"""
Adaptive item selector.

Orchestrates the speed, forgetting and sampling models against an injected
storage backend:

- record_response: update an item's statistics after an answer
- select_next: weighted random pick favoring slow, forgotten and unseen items
- get_recall / get_automaticity: read-only scores for progress displays
- check_all_mastered / check_all_automatic / check_needs_review: evaluators
  driving user-facing messages

The clock and random source are constructor dependencies and each is read at
most once per call, so a fixed (items, storage, rand, now) gives a fixed result.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger

from .forgetting import (
    compute_recall,
    compute_stability_after_wrong,
    elapsed_hours,
    update_stability,
)
from .models import DEFAULT_CONFIG, AdaptiveConfig, GroupRecall, ItemStats
from .sampling import compute_weight, select_weighted
from .scaling import derive_scaled_config, scale_for_response_count
from .speed import compute_automaticity_for_display, compute_ewma, compute_speed_score

if TYPE_CHECKING:
    from drill.storage.base import StatsStorage

G = TypeVar("G")

# Historical speed score an item must have reached to count as "once known"
REVIEW_SPEED_FLOOR = 0.5
REVIEW_MIN_SAMPLES = 2


class EmptySelectionError(ValueError):
    """select_next was called without any candidate items."""


def system_clock_ms() -> float:
    """Current wall-clock time in epoch milliseconds."""
    return time.time() * 1000


class AdaptiveSelector:
    """
    Stateful facade over the adaptive scheduling models.

    Each instance holds its own immutable config snapshot, so independent
    selectors (e.g. one per practice mode) never interfere.
    """

    def __init__(
        self,
        storage: StatsStorage,
        config: AdaptiveConfig = DEFAULT_CONFIG,
        clock: Callable[[], float] = system_clock_ms,
        rand: Callable[[], float] | None = None,
        response_count_fn: Callable[[str], int] | None = None,
        motor_baseline_ms: float | None = None,
    ):
        """
        Initialize the selector.

        Args:
            storage: Backend for item stats and the last-selected slot
            config: Tuning constants, calibrated for a 1000ms motor baseline
            clock: Returns the current time in epoch ms
            rand: Returns a float in [0, 1) (defaults to a private random.Random)
            response_count_fn: Number of inputs an item's answer needs (default 1)
            motor_baseline_ms: User's measured baseline; rescales absolute timings
        """
        self.storage = storage
        self._base_config = config
        self._motor_baseline_ms = motor_baseline_ms
        self._config = self._calibrate(config)
        self._clock = clock
        self._rand = rand if rand is not None else random.Random().random
        self._response_count_fn = response_count_fn

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def config(self) -> AdaptiveConfig:
        """Effective config, rescaled to the motor baseline when one is set."""
        return self._config

    @property
    def base_config(self) -> AdaptiveConfig:
        """Config before motor-baseline rescaling."""
        return self._base_config

    @property
    def motor_baseline_ms(self) -> float | None:
        return self._motor_baseline_ms

    def _calibrate(self, base: AdaptiveConfig) -> AdaptiveConfig:
        if self._motor_baseline_ms is None:
            return base
        return derive_scaled_config(self._motor_baseline_ms, base)

    def update_config(self, config: AdaptiveConfig | None = None, **overrides: Any) -> AdaptiveConfig:
        """
        Replace the base config with a new snapshot.

        The motor baseline, if any, is reapplied on top of the new base.

        Args:
            config: Full replacement (defaults to the current base config)
            **overrides: Fields to change on top of it

        Returns:
            The new effective config
        """
        if config is None and not overrides:
            return self._config

        base = config if config is not None else self._base_config
        self._base_config = base.merged(**overrides) if overrides else base
        previous, self._config = self._config, self._calibrate(self._base_config)
        if self._config != previous:
            logger.info(f"Adaptive config updated: {overrides or 'replaced'}")
        return self._config

    def apply_motor_baseline(self, baseline_ms: float) -> AdaptiveConfig:
        """Recalibrate absolute timings of the base config to a user's motor baseline."""
        logger.info(f"Applying motor baseline {baseline_ms:.0f}ms")
        self._motor_baseline_ms = baseline_ms
        self._config = self._calibrate(self._base_config)
        return self._config

    def response_count(self, item_id: str) -> int:
        return self._response_count_fn(item_id) if self._response_count_fn else 1

    def scaled_config(self, item_id: str) -> AdaptiveConfig:
        """Config with absolute timings scaled by the item's response count."""
        return scale_for_response_count(self._config, self.response_count(item_id))

    # =========================================================================
    # Recording
    # =========================================================================

    def record_response(self, item_id: str, time_ms: float, correct: bool = True) -> ItemStats:
        """
        Update an item's statistics after an answer.

        Correct answers update the latency model and grow stability. Wrong
        answers only shrink stability and touch last_seen.

        Args:
            item_id: Item identifier
            time_ms: Response latency in milliseconds
            correct: Whether the answer was correct

        Returns:
            The saved ItemStats
        """
        cfg = self._config
        item_cfg = self.scaled_config(item_id)
        clamped = max(0.0, min(time_ms, item_cfg.max_response_time))
        existing = self.storage.get_stats(item_id)
        now = self._clock()

        if correct and existing is not None:
            elapsed = elapsed_hours(existing.last_correct_at, now)
            stats = ItemStats(
                recent_times=[*existing.recent_times, clamped][-cfg.max_stored_times :],
                ewma=compute_ewma(existing.ewma, clamped, cfg.ewma_alpha),
                sample_count=existing.sample_count + 1,
                last_seen=now,
                stability=update_stability(existing.stability, clamped, elapsed, item_cfg),
                last_correct_at=now,
            )
        elif correct:
            stats = ItemStats(
                recent_times=[clamped],
                ewma=clamped,
                sample_count=1,
                last_seen=now,
                stability=cfg.initial_stability,
                last_correct_at=now,
            )
        elif existing is not None:
            stats = ItemStats(
                recent_times=list(existing.recent_times),
                ewma=existing.ewma,
                sample_count=existing.sample_count,
                last_seen=now,
                stability=compute_stability_after_wrong(existing.stability, cfg),
                last_correct_at=existing.last_correct_at,
            )
        else:
            # First interaction is wrong: seen and struggling, not unseen
            stats = ItemStats(
                recent_times=[],
                ewma=item_cfg.max_response_time,
                sample_count=0,
                last_seen=now,
                stability=cfg.initial_stability,
                last_correct_at=None,
            )

        self.storage.save_stats(item_id, stats)
        logger.debug(
            f"Recorded {item_id}: {'correct' if correct else 'wrong'} in {clamped:.0f}ms, "
            f"ewma={stats.ewma:.0f}, stability={stats.stability:.1f}h"
        )
        return stats

    # =========================================================================
    # Selection
    # =========================================================================

    def select_next(self, valid_items: Sequence[str]) -> str:
        """
        Choose the next item to present.

        The previously selected item gets zero weight so it is not repeated
        immediately.

        Raises:
            EmptySelectionError: If valid_items is empty
        """
        if not valid_items:
            raise EmptySelectionError("valid_items cannot be empty")

        if len(valid_items) == 1:
            selected = valid_items[0]
        else:
            last_selected = self.storage.get_last_selected()
            now = self._clock()
            weights = [
                0.0 if item_id == last_selected else self._weight(item_id, now)
                for item_id in valid_items
            ]
            selected = select_weighted(valid_items, weights, self._rand())

        self.storage.set_last_selected(selected)
        return selected

    def _weight(self, item_id: str, now: float) -> float:
        return compute_weight(self.storage.get_stats(item_id), self.scaled_config(item_id), now)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_stats(self, item_id: str) -> ItemStats | None:
        return self.storage.get_stats(item_id)

    def get_weight(self, item_id: str) -> float:
        return self._weight(item_id, self._clock())

    def get_recall(self, item_id: str) -> float | None:
        """Current recall probability, None if never answered correctly."""
        return self._recall(self.storage.get_stats(item_id), self._clock())

    def get_automaticity(self, item_id: str) -> float | None:
        """
        Display automaticity for an item.

        Returns:
            None if never attempted, 0 if attempted but not scoreable,
            otherwise recall * speed score
        """
        return self._automaticity(item_id, self.storage.get_stats(item_id), self._clock())

    @staticmethod
    def _recall(stats: ItemStats | None, now: float) -> float | None:
        if stats is None or stats.stability is None or stats.last_correct_at is None:
            return None
        return compute_recall(stats.stability, elapsed_hours(stats.last_correct_at, now))

    def _automaticity(self, item_id: str, stats: ItemStats | None, now: float) -> float | None:
        if stats is None:
            return None
        speed = compute_speed_score(stats.ewma, self.scaled_config(item_id))
        return compute_automaticity_for_display(self._recall(stats, now), speed, True)

    def group_recall_summary(
        self,
        groups: Iterable[G],
        get_item_ids: Callable[[G], Iterable[str]],
    ) -> list[GroupRecall]:
        """
        Count unseen, due and mastered items per group.

        Returns:
            One GroupRecall per group, most work needed first
        """
        now = self._clock()
        threshold = self._config.recall_threshold
        results = []
        for group in groups:
            due = unseen = mastered = total = 0
            for item_id in get_item_ids(group):
                total += 1
                recall = self._recall(self.storage.get_stats(item_id), now)
                if recall is None:
                    unseen += 1
                elif recall < threshold:
                    due += 1
                else:
                    mastered += 1
            results.append(GroupRecall(group, due, unseen, mastered, total))

        results.sort(key=lambda r: r.needs_work, reverse=True)
        return results

    # =========================================================================
    # Evaluators
    # =========================================================================

    def check_all_mastered(self, items: Sequence[str]) -> bool:
        """True if every item's recall is at or above recall_threshold. False for no items."""
        if not items:
            return False
        now = self._clock()
        for item_id in items:
            recall = self._recall(self.storage.get_stats(item_id), now)
            if recall is None or recall < self._config.recall_threshold:
                return False
        return True

    def check_all_automatic(self, items: Sequence[str]) -> bool:
        """True if every item is both remembered and fast (automaticity above threshold)."""
        if not items:
            return False
        now = self._clock()
        for item_id in items:
            auto = self._automaticity(item_id, self.storage.get_stats(item_id), now)
            if auto is None or auto <= self._config.automaticity_threshold:
                return False
        return True

    def check_needs_review(self, items: Sequence[str]) -> bool:
        """
        Check whether previously known material has decayed.

        True only when every item has at least two correct answers and once
        reached a speed score of 0.5, and at least one item's recall has
        since dropped below recall_threshold.
        """
        if not items:
            return False
        now = self._clock()
        has_due_item = False
        for item_id in items:
            stats = self.storage.get_stats(item_id)
            if stats is None or stats.last_correct_at is None or stats.sample_count < REVIEW_MIN_SAMPLES:
                return False
            speed = compute_speed_score(stats.ewma, self._config, self.response_count(item_id))
            if speed is None or speed < REVIEW_SPEED_FLOOR:
                return False
            recall = self._recall(stats, now)
            if recall is not None and recall < self._config.recall_threshold:
                has_due_item = True
        return has_due_item
