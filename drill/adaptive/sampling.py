"""
Selection weights and weighted random sampling.

Unseen items get a flat exploration weight. Seen items weigh more the slower
they are answered and the more their recall has decayed.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

from .forgetting import compute_recall, elapsed_hours
from .models import AdaptiveConfig, ItemStats

T = TypeVar("T")


def compute_weight(stats: ItemStats | None, cfg: AdaptiveConfig, now_ms: float) -> float:
    """
    Compute the selection weight for an item.

    - Unseen: unseen_boost.
    - Seen: max(ewma, min_time) / min_time, multiplied by a recall weight
      running from 1.0 (perfect recall) to 2.0 (fully forgotten) when the
      item has a forgetting-model state.

    Args:
        stats: Item statistics (None if never seen)
        cfg: Config scaled for the item
        now_ms: Current wall-clock time in epoch ms

    Returns:
        Non-negative weight
    """
    if stats is None:
        return cfg.unseen_boost

    speed_weight = max(stats.ewma, cfg.min_time) / cfg.min_time

    if stats.stability is not None and stats.last_correct_at is not None:
        recall = compute_recall(stats.stability, elapsed_hours(stats.last_correct_at, now_ms))
        recall_weight = 1 + (1 - recall) if recall is not None else 1.0
        return speed_weight * recall_weight

    return speed_weight


def select_weighted(items: Sequence[T], weights: Sequence[float], rand: float) -> T:
    """
    Weighted random pick by cumulative subtraction.

    Zero-weight items are never chosen unless every weight is zero, in which
    case the pick is uniform.

    Args:
        items: Candidates (non-empty)
        weights: One weight per candidate
        rand: Random number in [0, 1)

    Returns:
        The chosen item
    """
    total_weight = sum(weights)
    if total_weight == 0:
        return items[math.floor(rand * len(items))]

    remaining = rand * total_weight
    last_positive = items[-1]
    for item, weight in zip(items, weights):
        if weight <= 0:
            continue
        last_positive = item
        remaining -= weight
        if remaining <= 0:
            return item

    # Floating-point leftover when rand is just below 1
    return last_positive
