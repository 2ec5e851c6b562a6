"""
Redis backend for the counter buckets.
"""

from typing import Optional

import redis
import structlog

from ..models import CounterConfig
from .base import CounterCache, IncrementResult

logger = structlog.get_logger(__name__)


class RedisCounterCache(CounterCache):
    """Redis counter cache"""

    def __init__(self, config: CounterConfig):
        try:
            self.redis = redis.Redis(
                host=config.redis_host,
                port=config.redis_port,
                db=config.redis_db,
                password=config.redis_password,
                socket_timeout=config.redis_socket_timeout,
                decode_responses=True,
            )
            self.redis.ping()  # Test connection
            logger.info("Redis counter cache initialized", host=config.redis_host, port=config.redis_port)
        except Exception as e:
            logger.error("Failed to initialize Redis", error=str(e))
            raise

    @classmethod
    def from_client(cls, client: redis.Redis) -> "RedisCounterCache":
        """Wrap an already configured Redis client"""
        cache = cls.__new__(cls)
        cache.redis = client
        return cache

    def increment(self, namespace: str, key: str, ttl: int, step: int) -> IncrementResult:
        """Create the bucket at 0 if absent, then increment it, in one transaction"""
        key = self._make_key(namespace, key)
        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.set(key, 0, ex=ttl, nx=True)
            pipe.incrby(key, step)
            _, value = pipe.execute()
            return IncrementResult.success(int(value))
        except redis.RedisError as e:
            logger.error("Failed to increment counter in Redis", key=key, error=str(e))
            return IncrementResult.failure(str(e))

    def get(self, namespace: str, key: str) -> Optional[int]:
        key = self._make_key(namespace, key)
        try:
            data = self.redis.get(key)
        except redis.RedisError as e:
            logger.error("Failed to read counter from Redis", key=key, error=str(e))
            return None

        if data is None:
            return None

        try:
            return int(data)
        except (TypeError, ValueError):
            logger.warning("Non-integer counter value in Redis", key=key)
            return None

    def _make_key(self, namespace: str, key: str) -> str:
        """Generate Redis key"""
        return f"{namespace}:{key}"
