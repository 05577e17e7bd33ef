"""
Factory wiring settings, storage and the adaptive selector together.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from drill.adaptive.selector import AdaptiveSelector, system_clock_ms
from drill.config import Settings, get_settings
from drill.storage import MemoryStorage, SQLiteStorage, StatsStorage


def create_storage(settings: Settings | None = None, namespace: str | None = None) -> StatsStorage:
    """
    Create the statistics backend selected by settings.

    Args:
        settings: Settings (defaults to the cached environment settings)
        namespace: Overrides settings.storage_namespace for this store

    Returns:
        MemoryStorage or SQLiteStorage
    """
    settings = settings or get_settings()

    if settings.storage_backend == "memory":
        logger.info("Using in-memory statistics storage")
        return MemoryStorage()

    return SQLiteStorage(
        db_path=settings.state_db_path,
        namespace=namespace or settings.storage_namespace,
    )


def create_selector(
    settings: Settings | None = None,
    storage: StatsStorage | None = None,
    namespace: str | None = None,
    clock: Callable[[], float] = system_clock_ms,
    rand: Callable[[], float] | None = None,
    response_count_fn: Callable[[str], int] | None = None,
) -> AdaptiveSelector:
    """
    Create a selector configured from settings.

    The config is the built-in defaults plus any DRILL_ADAPTIVE_* overrides,
    rescaled to the motor baseline when one is configured.
    """
    settings = settings or get_settings()

    if settings.motor_baseline_ms is not None:
        logger.info(f"Timings scaled to motor baseline {settings.motor_baseline_ms:.0f}ms")

    return AdaptiveSelector(
        storage=storage if storage is not None else create_storage(settings, namespace),
        config=settings.adaptive_config(),
        clock=clock,
        rand=rand,
        response_count_fn=response_count_fn,
        motor_baseline_ms=settings.motor_baseline_ms,
    )
