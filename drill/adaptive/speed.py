"""
Response-speed model and automaticity.

Speed score maps a smoothed latency onto [0, 1]:
- min_time           -> 1.0 (fully automatic)
- automaticity_target -> 0.5
- very slow          -> approaches 0

Automaticity = recall * speed score ("do I know this without thinking?").
"""

from __future__ import annotations

import math

from .models import AdaptiveConfig


def compute_ewma(old_ewma: float, new_time: float, alpha: float) -> float:
    return alpha * new_time + (1 - alpha) * old_ewma


def compute_speed_score(
    ewma_ms: float | None,
    cfg: AdaptiveConfig,
    response_count: int = 1,
) -> float | None:
    """
    Exponential-decay speed score.

    For items needing several inputs, the timing thresholds scale with
    response_count so an N-input answer in N times the time scores the same.

    Args:
        ewma_ms: Smoothed latency (None for no data)
        cfg: Adaptive config
        response_count: Expected number of inputs for the item

    Returns:
        Score in [0, 1], or None if there is no latency
    """
    if ewma_ms is None:
        return None
    effective_target = cfg.automaticity_target * response_count
    effective_min = cfg.min_time * response_count
    k = math.log(2) / (effective_target - effective_min)
    return math.exp(-k * max(0.0, ewma_ms - effective_min))


def compute_automaticity(
    recall: float | None,
    speed_score: float | None,
) -> float | None:
    if recall is None or speed_score is None:
        return None
    return recall * speed_score


def compute_automaticity_for_display(
    recall: float | None,
    speed_score: float | None,
    has_been_attempted: bool,
) -> float | None:
    """
    Automaticity for heatmap display.

    Returns 0 instead of None for attempted items that cannot be scored yet,
    so the display can tell "needs work" apart from "no data".
    """
    value = compute_automaticity(recall, speed_score)
    if value is None and has_been_attempted:
        return 0.0
    return value
