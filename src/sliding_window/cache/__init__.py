"""
Counter cache backends.
"""

from .base import CounterCache, IncrementResult
from .memory import InMemoryCounterCache
from .redis_cache import RedisCounterCache

__all__ = ["CounterCache", "IncrementResult", "InMemoryCounterCache", "RedisCounterCache"]
