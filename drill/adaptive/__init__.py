"""
Adaptive: the drill scheduling core.

Components:
- AdaptiveConfig / ItemStats: data model
- forgetting: half-life recall model and stability updates
- speed: latency smoothing, speed score, automaticity
- sampling: selection weights and weighted random draw
- scaling: response-count and motor-baseline config scaling
- AdaptiveSelector: storage-backed facade with evaluators
"""

from .forgetting import compute_recall, compute_stability_after_wrong, update_stability
from .models import DEFAULT_CONFIG, AdaptiveConfig, GroupRecall, ItemStats
from .sampling import compute_weight, select_weighted
from .scaling import compute_median, derive_scaled_config, scale_for_response_count
from .selector import AdaptiveSelector, EmptySelectionError
from .speed import (
    compute_automaticity,
    compute_automaticity_for_display,
    compute_ewma,
    compute_speed_score,
)

__all__ = [
    # Models
    "AdaptiveConfig",
    "DEFAULT_CONFIG",
    "ItemStats",
    "GroupRecall",
    # Forgetting
    "compute_recall",
    "update_stability",
    "compute_stability_after_wrong",
    # Speed
    "compute_ewma",
    "compute_speed_score",
    "compute_automaticity",
    "compute_automaticity_for_display",
    # Sampling
    "compute_weight",
    "select_weighted",
    # Scaling
    "scale_for_response_count",
    "derive_scaled_config",
    "compute_median",
    # Selector
    "AdaptiveSelector",
    "EmptySelectionError",
]
