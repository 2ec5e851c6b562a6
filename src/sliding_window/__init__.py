"""
Sliding Window Counter

Short-lived time series for arbitrary keys (IP address, user ID, ASN, ...),
kept entirely in an expiring cache.

Architecture:
- Buckets: fixed-size counters in a cache (Redis or in-process) expiring after the observation period
- Frames: logical sampling instants reconstructed from the two buckets they overlap
- Anomaly detection: the latest extrapolated value tested against the historic mean and standard deviation

Usage:
    cache = RedisCounterCache(CounterConfig(redis_host="localhost"))
    counter = SlidingWindowCounter("my-counters", 3600, 3600 * 24, cache, SystemClock())

    counter.increment("192.168.1.1")
    if counter.detect_anomaly("192.168.1.1").is_anomaly():
        ...
"""

from .anomaly import AnomalyDetectionResult, Direction
from .cache import CounterCache, IncrementResult, InMemoryCounterCache, RedisCounterCache
from .clock import Clock, SystemClock
from .counter import SlidingWindowCounter
from .exceptions import ConfigurationError, InvalidRange, SlidingWindowError, TooFarInPast
from .frames import Frame, FrameBuilder
from .models import CounterConfig
from .variance import RunningVariance

__all__ = [
    "AnomalyDetectionResult",
    "Clock",
    "ConfigurationError",
    "CounterCache",
    "CounterConfig",
    "Direction",
    "Frame",
    "FrameBuilder",
    "IncrementResult",
    "InMemoryCounterCache",
    "InvalidRange",
    "RedisCounterCache",
    "RunningVariance",
    "SlidingWindowCounter",
    "SlidingWindowError",
    "SystemClock",
    "TooFarInPast",
]

__version__ = "1.0.0"
