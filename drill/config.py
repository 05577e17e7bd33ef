"""
Configuration settings for the drill scheduler.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are prefixed with DRILL_ (e.g. DRILL_LOG_LEVEL=DEBUG).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from drill.adaptive.models import DEFAULT_CONFIG, AdaptiveConfig

# Settings field -> AdaptiveConfig field
_ADAPTIVE_OVERRIDES = {
    "adaptive_min_time_ms": "min_time",
    "adaptive_unseen_boost": "unseen_boost",
    "adaptive_ewma_alpha": "ewma_alpha",
    "adaptive_max_stored_times": "max_stored_times",
    "adaptive_max_response_time_ms": "max_response_time",
    "adaptive_initial_stability_hours": "initial_stability",
    "adaptive_max_stability_hours": "max_stability",
    "adaptive_stability_growth_base": "stability_growth_base",
    "adaptive_stability_decay_on_wrong": "stability_decay_on_wrong",
    "adaptive_recall_threshold": "recall_threshold",
    "adaptive_expansion_threshold": "expansion_threshold",
    "adaptive_speed_bonus_max": "speed_bonus_max",
    "adaptive_self_correction_threshold_ms": "self_correction_threshold",
    "adaptive_automaticity_target_ms": "automaticity_target",
    "adaptive_automaticity_threshold": "automaticity_threshold",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DRILL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    storage_backend: Literal["sqlite", "memory"] = Field(
        default="sqlite",
        description="Statistics backend: durable SQLite or ephemeral memory",
    )
    state_db_path: Path = Field(
        default=Path.home() / ".drill" / "state.db",
        description="SQLite database holding per-item statistics",
    )
    storage_namespace: str = Field(
        default="default",
        description="Key prefix separating practice modes in one database",
    )

    # ========================================
    # Calibration
    # ========================================
    motor_baseline_ms: float | None = Field(
        default=None,
        gt=0,
        description="Measured motor baseline; rescales absolute timings when set",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Adaptive Tuning (None = built-in default)
    # ========================================
    adaptive_min_time_ms: float | None = Field(default=None, gt=0)
    adaptive_unseen_boost: float | None = Field(default=None, ge=0)
    adaptive_ewma_alpha: float | None = Field(default=None, gt=0, le=1)
    adaptive_max_stored_times: int | None = Field(default=None, ge=1)
    adaptive_max_response_time_ms: float | None = Field(default=None, gt=0)
    adaptive_initial_stability_hours: float | None = Field(default=None, gt=0)
    adaptive_max_stability_hours: float | None = Field(default=None, gt=0)
    adaptive_stability_growth_base: float | None = Field(default=None, gt=0)
    adaptive_stability_decay_on_wrong: float | None = Field(default=None, gt=0, le=1)
    adaptive_recall_threshold: float | None = Field(default=None, ge=0, le=1)
    adaptive_expansion_threshold: float | None = Field(default=None, ge=0, le=1)
    adaptive_speed_bonus_max: float | None = Field(default=None, gt=0)
    adaptive_self_correction_threshold_ms: float | None = Field(default=None, gt=0)
    adaptive_automaticity_target_ms: float | None = Field(default=None, gt=0)
    adaptive_automaticity_threshold: float | None = Field(default=None, ge=0, le=1)

    def adaptive_overrides(self) -> dict[str, float | int]:
        """Tuning values set in the environment, keyed by AdaptiveConfig field."""
        return {
            target: getattr(self, name)
            for name, target in _ADAPTIVE_OVERRIDES.items()
            if getattr(self, name) is not None
        }

    @model_validator(mode="after")
    def check_timing_order(self) -> Settings:
        """Reject timings the speed model cannot score (target must exceed min)."""
        cfg = self.adaptive_config()
        if cfg.automaticity_target <= cfg.min_time:
            raise ValueError(
                f"automaticity target ({cfg.automaticity_target}ms) must exceed "
                f"min time ({cfg.min_time}ms)"
            )
        if cfg.max_response_time < cfg.min_time:
            raise ValueError(
                f"max response time ({cfg.max_response_time}ms) must not be below "
                f"min time ({cfg.min_time}ms)"
            )
        return self

    def adaptive_config(self) -> AdaptiveConfig:
        """Build the adaptive config from defaults plus environment overrides."""
        overrides = self.adaptive_overrides()
        return DEFAULT_CONFIG.merged(**overrides) if overrides else DEFAULT_CONFIG


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
