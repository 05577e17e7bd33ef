"""
Half-life forgetting model.

Recall probability decays as P = 2^(-t/S), where S is the item's stability
(hours until P drops to 0.5). Correct answers grow stability, faster answers
grow it more; wrong answers shrink it toward the initial baseline.
"""

from __future__ import annotations

from .models import AdaptiveConfig

MS_PER_HOUR = 3_600_000

# A fast correct answer after a gap of t hours implies a half-life of at least
# t * SELF_CORRECTION_FACTOR.
SELF_CORRECTION_FACTOR = 1.5
MIN_SPEED_FACTOR = 0.5


def elapsed_hours(since_ms: float | None, now_ms: float) -> float | None:
    """Hours between two epoch-ms timestamps, None if there is no start."""
    if since_ms is None:
        return None
    return (now_ms - since_ms) / MS_PER_HOUR


def compute_recall(
    stability_hours: float | None,
    elapsed: float | None,
) -> float | None:
    """
    Predicted recall probability using the half-life model.

    At elapsed == stability, recall is exactly 0.5.

    Args:
        stability_hours: Current half-life in hours
        elapsed: Hours since the last correct answer

    Returns:
        Probability in [0, 1], or None if either input is missing
    """
    if stability_hours is None or elapsed is None:
        return None
    if stability_hours <= 0:
        return 0.0
    if elapsed <= 0:
        return 1.0
    return 2 ** (-elapsed / stability_hours)


def update_stability(
    old_stability: float | None,
    response_time_ms: float,
    elapsed: float | None,
    cfg: AdaptiveConfig,
) -> float:
    """
    Compute new stability after a correct answer.

    - First correct answer: initial_stability.
    - Subsequent: old * stability_growth_base * speed_factor, where
      speed_factor runs from 0.5 (slowest) to speed_bonus_max (fastest).
    - Self-correction: a fast answer after a gap lifts stability to at
      least elapsed * 1.5.

    Args:
        old_stability: Previous stability in hours (None if never correct)
        response_time_ms: Latency of this answer
        elapsed: Hours since the previous correct answer
        cfg: Config (already scaled for the item's response count)

    Returns:
        New stability in hours, capped at max_stability
    """
    if old_stability is None:
        return cfg.initial_stability

    span = cfg.max_response_time - cfg.min_time
    clamped = max(cfg.min_time, min(response_time_ms, cfg.max_response_time))
    t = (cfg.max_response_time - clamped) / span if span > 0 else 0.5
    speed_factor = MIN_SPEED_FACTOR + t * (cfg.speed_bonus_max - MIN_SPEED_FACTOR)

    new_stability = old_stability * cfg.stability_growth_base * speed_factor

    if elapsed is not None and elapsed > 0 and response_time_ms < cfg.self_correction_threshold:
        new_stability = max(new_stability, elapsed * SELF_CORRECTION_FACTOR)

    return min(new_stability, cfg.max_stability)


def compute_stability_after_wrong(
    old_stability: float | None,
    cfg: AdaptiveConfig,
) -> float:
    """Shrink stability after a wrong answer, never below initial_stability."""
    if old_stability is None:
        return cfg.initial_stability
    return max(cfg.initial_stability, old_stability * cfg.stability_decay_on_wrong)
