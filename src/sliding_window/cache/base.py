"""
Counter cache interface.

A counter cache is an expiring key/value store offering two operations:
an atomic increment which creates the key at 0 with the given TTL when it is
absent, and a point lookup.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IncrementResult:
    """Outcome of a cache increment"""

    value: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: int) -> "IncrementResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "IncrementResult":
        return cls(error=error)


class CounterCache(ABC):
    """Backing store for the counter buckets"""

    @abstractmethod
    def increment(self, namespace: str, key: str, ttl: int, step: int) -> IncrementResult:
        """Atomically add ``step`` to a bucket, creating it with ``ttl`` if absent

        Args:
            namespace: Cache name (or domain) to use
            key: Bucket key
            ttl: Maximum number of seconds for the bucket to last in cache
            step: Increment by this amount

        Returns:
            The bucket value after the increment, or the failure reported by
            the backend
        """
        pass

    @abstractmethod
    def get(self, namespace: str, key: str) -> Optional[int]:
        """Current bucket value, None when absent"""
        pass
