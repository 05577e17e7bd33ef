"""
Data models for the adaptive drill scheduler.

- AdaptiveConfig: immutable tuning constants (timing, smoothing, forgetting model)
- ItemStats: per-item response statistics and memory state
- GroupRecall: recall breakdown for a group of items
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class AdaptiveConfig:
    """
    Tuning constants for the adaptive selector.

    All timings are milliseconds, all stabilities are hours. Instances are
    never mutated; use merged() to derive a new snapshot.
    """

    min_time: float = 1000  # Fastest plausible response
    unseen_boost: float = 3  # Selection weight for never-seen items
    ewma_alpha: float = 0.3
    max_stored_times: int = 10
    max_response_time: float = 9000  # Latencies are clamped to this

    # Forgetting model
    initial_stability: float = 4  # Half-life after first correct answer
    max_stability: float = 336  # 14 days
    stability_growth_base: float = 2.0  # Multiplier on each correct answer
    stability_decay_on_wrong: float = 0.3  # Multiplier on wrong answer
    recall_threshold: float = 0.5  # P(recall) below this = "due"
    expansion_threshold: float = 0.7  # Retained fraction before suggesting new groups
    speed_bonus_max: float = 1.5  # Fast answers grow stability up to this factor
    self_correction_threshold: float = 1500  # Faster than this triggers self-correction

    # Speed / automaticity
    automaticity_target: float = 3000  # Latency at which speed score is 0.5
    automaticity_threshold: float = 0.8  # Above this = "automatic"

    def merged(self, **overrides: Any) -> AdaptiveConfig:
        """
        Return a copy with the given fields replaced.

        Raises:
            TypeError: If an override names an unknown field
        """
        return replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = AdaptiveConfig()


# =============================================================================
# Item Statistics
# =============================================================================


class ItemStatsRecord(BaseModel):
    """Wire schema for a persisted ItemStats record (camelCase JSON)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    recent_times: list[float] = Field(default_factory=list, alias="recentTimes")
    ewma: float
    sample_count: int = Field(default=0, alias="sampleCount")
    last_seen: float = Field(default=0, alias="lastSeen")
    stability: float | None = None
    last_correct_at: float | None = Field(default=None, alias="lastCorrectAt")


@dataclass
class ItemStats:
    """Response statistics and memory state for a single item."""

    ewma: float  # Smoothed latency (ms)
    last_seen: float  # Epoch ms of most recent response
    recent_times: list[float] = field(default_factory=list)
    sample_count: int = 0  # Correct answers contributing to ewma
    stability: float | None = None  # Half-life in hours
    last_correct_at: float | None = None  # Epoch ms of most recent correct answer

    @property
    def has_been_correct(self) -> bool:
        return self.last_correct_at is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase record used by durable storage."""
        return {
            "recentTimes": list(self.recent_times),
            "ewma": self.ewma,
            "sampleCount": self.sample_count,
            "lastSeen": self.last_seen,
            "stability": self.stability,
            "lastCorrectAt": self.last_correct_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ItemStats:
        """
        Build from a persisted record.

        Raises:
            pydantic.ValidationError: If the record is malformed
        """
        record = ItemStatsRecord.model_validate(data)
        return cls(
            ewma=record.ewma,
            last_seen=record.last_seen,
            recent_times=record.recent_times,
            sample_count=record.sample_count,
            stability=record.stability,
            last_correct_at=record.last_correct_at,
        )


@dataclass
class GroupRecall:
    """Recall breakdown for one group of items (e.g. a string on the fretboard)."""

    group: Any
    due_count: int
    unseen_count: int
    mastered_count: int
    total_count: int

    @property
    def needs_work(self) -> int:
        return self.due_count + self.unseen_count
