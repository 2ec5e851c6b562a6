"""
Pytest configuration and shared fixtures.
"""

from typing import Optional

import pytest
import structlog

from src.sliding_window.cache.base import CounterCache, IncrementResult
from src.sliding_window.clock import Clock
from src.sliding_window.models import CounterConfig


class FakeClock(Clock):
    """Clock frozen at a settable time"""

    def __init__(self, time: int = 0):
        self.time = time

    def now(self) -> int:
        return self.time

    def set(self, time: int) -> None:
        self.time = time


class FakeCache(CounterCache):
    """Counter cache without expiry"""

    def __init__(self):
        self.data: dict[str, dict[str, int]] = {}

    def increment(self, namespace: str, key: str, ttl: int, step: int) -> IncrementResult:
        bucket = self.data.setdefault(namespace, {})
        bucket[key] = bucket.get(key, 0) + step
        return IncrementResult.success(bucket[key])

    def get(self, namespace: str, key: str) -> Optional[int]:
        return self.data.get(namespace, {}).get(key)


@pytest.fixture(autouse=True)
def quiet_logging():
    """Route structlog events to return values instead of stdout."""
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def clock():
    """Clock frozen at 997 (a prime number)."""
    return FakeClock(997)


@pytest.fixture
def fake_cache():
    """Empty counter cache without expiry."""
    return FakeCache()


@pytest.fixture
def counter_config():
    """Counter configuration for testing."""
    return CounterConfig(
        namespace="test-counters",
        window_size=60,
        observation_period=3600,
        redis_host="localhost",
        redis_port=6379,
        redis_db=1,
    )
