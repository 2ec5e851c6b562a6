"""
In-process counter cache.

Suitable for a single process (workers of one service, tests, local runs);
the buckets are lost on restart like any other object cache.
"""

import heapq
import threading
from typing import Optional

import structlog

from ..clock import Clock
from .base import CounterCache, IncrementResult

logger = structlog.get_logger(__name__)


class InMemoryCounterCache(CounterCache):
    """Expiring in-memory counter cache

    Expired buckets are evicted on every operation, oldest first, so the
    cache holds at most the buckets created within the last TTL.
    """

    def __init__(self, clock: Clock):
        self.clock = clock
        self._lock = threading.Lock()
        # (namespace, key) -> (value, expires_at)
        self._entries: dict[tuple[str, str], tuple[int, int]] = {}
        # (expires_at, (namespace, key)), one per created bucket
        self._expiries: list[tuple[int, tuple[str, str]]] = []

    def increment(self, namespace: str, key: str, ttl: int, step: int) -> IncrementResult:
        now = self.clock.now()
        cache_key = (namespace, key)
        with self._lock:
            self._evict(now)
            entry = self._entries.get(cache_key)
            if entry is None:
                entry = (0, now + ttl)
                heapq.heappush(self._expiries, (entry[1], cache_key))
            value = entry[0] + step
            self._entries[cache_key] = (value, entry[1])

        return IncrementResult.success(value)

    def get(self, namespace: str, key: str) -> Optional[int]:
        with self._lock:
            self._evict(self.clock.now())
            entry = self._entries.get((namespace, key))
        return None if entry is None else entry[0]

    def purge(self) -> int:
        """Drop expired buckets

        Returns:
            Number of buckets removed
        """
        with self._lock:
            removed = self._evict(self.clock.now())

        if removed:
            logger.debug("Purged expired buckets", count=removed)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict(self, now: int) -> int:
        removed = 0
        while self._expiries and self._expiries[0][0] <= now:
            expires_at, cache_key = heapq.heappop(self._expiries)
            entry = self._entries.get(cache_key)
            # A recreated bucket has its own, later expiry in the heap
            if entry is not None and entry[1] == expires_at:
                del self._entries[cache_key]
                removed += 1
        return removed
