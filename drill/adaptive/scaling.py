"""
Config scaling for multi-input items and per-user motor baselines.

Only the four absolute-latency fields are scaled (min_time,
automaticity_target, max_response_time, self_correction_threshold). Ratio
fields such as ewma_alpha, growth/decay multipliers and probability
thresholds are left untouched.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import DEFAULT_CONFIG, AdaptiveConfig

# The default config assumes a motor baseline of one second.
REFERENCE_BASELINE_MS = 1000


def scale_for_response_count(cfg: AdaptiveConfig, response_count: int) -> AdaptiveConfig:
    """Scale absolute timings for an item that needs several inputs to answer."""
    if response_count <= 1:
        return cfg
    return cfg.merged(
        min_time=cfg.min_time * response_count,
        automaticity_target=cfg.automaticity_target * response_count,
        max_response_time=cfg.max_response_time * response_count,
        self_correction_threshold=cfg.self_correction_threshold * response_count,
    )


def derive_scaled_config(
    motor_baseline_ms: float,
    base_config: AdaptiveConfig = DEFAULT_CONFIG,
) -> AdaptiveConfig:
    """
    Derive a config calibrated to a user's motor baseline.

    Args:
        motor_baseline_ms: Measured baseline reaction time
        base_config: Config calibrated for a 1000ms baseline

    Returns:
        Config with absolute timings scaled and rounded to whole ms
    """
    scale = motor_baseline_ms / REFERENCE_BASELINE_MS
    return base_config.merged(
        min_time=round(base_config.min_time * scale),
        automaticity_target=round(base_config.automaticity_target * scale),
        self_correction_threshold=round(base_config.self_correction_threshold * scale),
        max_response_time=round(base_config.max_response_time * scale),
    )


def compute_median(values: Iterable[float]) -> float | None:
    """Median of the values (input is not modified), None if empty."""
    ordered = sorted(values)
    if not ordered:
        return None
    mid = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2
