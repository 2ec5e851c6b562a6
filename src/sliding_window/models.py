"""
Configuration for a sliding window counter and its cache backend.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CounterConfig:
    """Configuration for the counter and its Redis backend"""

    namespace: str = "sliding-window"

    # Bucket granularity and retention, in seconds
    window_size: int = 3600
    observation_period: int = 86400  # 24 hourly buckets

    # Standard deviations defining the anomaly bounds: 3 = low, 2 = standard, 1 = high
    sensitivity: int = 2

    # Redis settings
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None
    redis_socket_timeout: float = 5.0
