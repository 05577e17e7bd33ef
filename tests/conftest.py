"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from drill.adaptive import DEFAULT_CONFIG, AdaptiveSelector  # noqa: E402
from drill.storage import MemoryStorage  # noqa: E402

MS_PER_HOUR = 3_600_000
START_MS = 1_700_000_000_000


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (touch the filesystem)")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


class FakeClock:
    """Manually advanced wall clock (epoch ms)."""

    def __init__(self, now_ms: float = START_MS):
        self.now_ms = now_ms
        self.reads = 0

    def __call__(self) -> float:
        self.reads += 1
        return self.now_ms

    def advance_hours(self, hours: float) -> None:
        self.now_ms += hours * MS_PER_HOUR


class FakeRandom:
    """Random source returning a fixed value, counting calls."""

    def __init__(self, value: float = 0.0):
        self.value = value
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        return self.value


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rand():
    return FakeRandom()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def selector(memory_storage, clock, rand):
    """Selector on memory storage with the default config and fake clock/random."""
    return AdaptiveSelector(memory_storage, DEFAULT_CONFIG, clock=clock, rand=rand)
