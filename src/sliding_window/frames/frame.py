"""
Logical sampling frame and its overlap with the material (cached) buckets.

A material bucket is aligned to the window size and lives in the cache. A
logical frame is any instant in time; it covers one window ending at that
instant, which straddles at most two material buckets:

    |<----- bucket (start - w) ----->|<------- bucket (start) ------->|
                      |<============ logical frame ============>|
                                                               time
"""

from typing import Optional


class Frame:
    """A logical frame of the sliding window counter"""

    def __init__(self, time: int, window_size: int):
        self._time = time
        self._window_size = window_size
        self._value: Optional[float] = None

    @property
    def time(self) -> int:
        """The logical reference time"""
        return self._time

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def start(self) -> int:
        """Start of the material bucket holding the reference time"""
        return self._time - self._time % self._window_size

    @property
    def value(self) -> float:
        """The material value, 0.0 when nothing was fetched"""
        if self._value is None:
            return 0.0
        return self._value

    def set_value(self, value: Optional[float]) -> "Frame":
        """Attach a material value read from the cache

        Args:
            value: The cached value, or None when the bucket is absent

        Returns:
            The frame itself
        """
        self._value = None if value is None else float(value)
        return self

    def has_null_value(self) -> bool:
        return self._value is None

    def frame_overlap(self) -> dict[int, int]:
        """Seconds of overlap with each of the two material buckets

        On the bucket boundary the current bucket contributes 0 seconds and the
        previous bucket the whole window.

        Returns:
            Mapping of material bucket start to overlapping seconds; the values
            always sum to the window size
        """
        current_seconds = self._time - self.start

        return {
            self.start - self._window_size: self._window_size - current_seconds,
            self.start: current_seconds,
        }

    def cache_key(self, bucket_key: str, observation_period: int) -> str:
        """Key of the material bucket in the counter cache

        Args:
            bucket_key: Caller supplied key (IP address, user ID, ASN, ...)
            observation_period: The counter's observation period in seconds

        Returns:
            Key shared by every frame in the same bucket for this configuration
        """
        return ":".join(
            str(part)
            for part in (bucket_key, observation_period, self._window_size, self._window_id())
        )

    def _window_id(self) -> int:
        return self._time // self._window_size

    def __repr__(self) -> str:
        return f"Frame(time={self._time}, window_size={self._window_size}, value={self._value})"
