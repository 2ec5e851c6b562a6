"""
Tests for the Redis counter cache.
"""

from unittest.mock import MagicMock, patch

import pytest
import redis

from src.sliding_window.cache.redis_cache import RedisCounterCache


class TestRedisCounterCache:
    """Tests for RedisCounterCache."""

    @patch("src.sliding_window.cache.redis_cache.redis.Redis")
    def test_initialization(self, mock_redis_class, counter_config):
        """Test the client is configured and pinged."""
        mock_client = MagicMock()
        mock_redis_class.return_value = mock_client

        cache = RedisCounterCache(counter_config)

        mock_redis_class.assert_called_once_with(
            host="localhost",
            port=6379,
            db=1,
            password=None,
            socket_timeout=5.0,
            decode_responses=True,
        )
        mock_client.ping.assert_called_once()
        assert cache.redis == mock_client

    @patch("src.sliding_window.cache.redis_cache.redis.Redis")
    def test_initialization_failure(self, mock_redis_class, counter_config):
        """Test connection errors at startup propagate."""
        mock_redis_class.return_value.ping.side_effect = redis.ConnectionError("Connection refused")

        with pytest.raises(redis.ConnectionError, match="Connection refused"):
            RedisCounterCache(counter_config)

    def test_increment(self):
        """Test the bucket is created with its TTL then incremented, in one transaction."""
        client = MagicMock()
        pipe = client.pipeline.return_value
        pipe.execute.return_value = [True, 1]

        cache = RedisCounterCache.from_client(client)
        result = cache.increment("foo", "example", 60, 1)

        client.pipeline.assert_called_once_with(transaction=True)
        pipe.set.assert_called_once_with("foo:example", 0, ex=60, nx=True)
        pipe.incrby.assert_called_once_with("foo:example", 1)
        assert result.ok
        assert result.value == 1

    def test_increment_existing_bucket(self):
        """Test an existing bucket keeps counting."""
        client = MagicMock()
        client.pipeline.return_value.execute.return_value = [None, 42]

        result = RedisCounterCache.from_client(client).increment("foo", "example", 60, 2)

        assert result.value == 42

    def test_increment_failure(self):
        """Test Redis errors become a failed result."""
        client = MagicMock()
        client.pipeline.return_value.execute.side_effect = redis.ConnectionError("Connection lost")

        result = RedisCounterCache.from_client(client).increment("foo", "example", 60, 1)

        assert not result.ok
        assert result.value is None
        assert "Connection lost" in result.error

    def test_get_int(self):
        """Test integer values are parsed."""
        client = MagicMock()
        client.get.return_value = "42"

        assert RedisCounterCache.from_client(client).get("foo", "example") == 42
        client.get.assert_called_once_with("foo:example")

    def test_get_missing(self):
        """Test absent keys read as None."""
        client = MagicMock()
        client.get.return_value = None

        assert RedisCounterCache.from_client(client).get("foo", "example") is None

    def test_get_non_integer(self):
        """Test non-integer values read as None."""
        client = MagicMock()
        client.get.return_value = "bar"

        assert RedisCounterCache.from_client(client).get("foo", "example") is None

    def test_get_failure(self):
        """Test Redis errors read as None."""
        client = MagicMock()
        client.get.side_effect = redis.TimeoutError("Timed out")

        assert RedisCounterCache.from_client(client).get("foo", "example") is None
