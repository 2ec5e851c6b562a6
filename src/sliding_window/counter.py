"""
Sliding window counter and short-lived time series.

Counts are kept in fixed-size buckets in an expiring cache. Reading them back
reconstructs an approximate continuous time series by weighting the two
buckets each logical frame overlaps, as described in
https://blog.cloudflare.com/counting-things-a-lot-of-different-things/
"""

from typing import Iterator, Optional

import structlog

from .anomaly import AnomalyDetectionResult
from .cache.base import CounterCache, IncrementResult
from .clock import Clock, SystemClock
from .exceptions import ConfigurationError, TooFarInPast
from .frames import Frame, FrameBuilder
from .models import CounterConfig
from .variance import RunningVariance

logger = structlog.get_logger(__name__)


class SlidingWindowCounter:
    """Sliding window counter with anomaly detection"""

    def __init__(
        self,
        namespace: str,
        window_size: int,
        observation_period: int,
        counter_cache: CounterCache,
        clock: Optional[Clock] = None,
        frame_builder: Optional[FrameBuilder] = None,
    ):
        """Create a counter

        Args:
            namespace: Cache name to use for the buckets
            window_size: Size of the sampling window in seconds
            observation_period: Maximum number of seconds for buckets to persist in the cache
            counter_cache: Backing counter cache
            clock: Time source; the system clock when omitted
            frame_builder: Frame range helper; built from the other arguments when omitted

        Raises:
            ConfigurationError: On a blank namespace or non-positive sizes
        """
        if not namespace:
            raise ConfigurationError("Cache name expected to be a non-blank string")
        if window_size < 1:
            raise ConfigurationError(
                f"Window size expected to be a strictly positive integer, received: {window_size}"
            )
        if observation_period < 1:
            raise ConfigurationError(
                "Observation period expected to be a strictly positive integer, "
                f"received: {observation_period}"
            )

        self.namespace = namespace
        self.window_size = window_size
        self.observation_period = observation_period
        self.counter_cache = counter_cache

        if clock is None:
            clock = SystemClock()
        self.clock = clock

        if frame_builder is None:
            frame_builder = FrameBuilder(window_size, observation_period, clock)
        self.frame_builder = frame_builder

    @classmethod
    def from_config(
        cls, config: CounterConfig, counter_cache: CounterCache, clock: Optional[Clock] = None
    ) -> "SlidingWindowCounter":
        return cls(
            config.namespace,
            config.window_size,
            config.observation_period,
            counter_cache,
            clock=clock,
        )

    def increment(self, bucket_key: str, step: int = 1, at_time: Optional[int] = None) -> IncrementResult:
        """Increment a counter

        Args:
            bucket_key: The bucket key, such as IP subnet, ASN, or anything that works for a bucket key
            step: The step
            at_time: The optional time to increment the counter at

        Returns:
            The cache's result: the new bucket value, or its failure

        Raises:
            TooFarInPast: If the time provided precedes the observation period
        """
        now = self.clock.now()

        if at_time is not None and at_time < now - self.observation_period:
            raise TooFarInPast(
                f"The time provided ({at_time}) is too far in the past "
                f"(current time: {now}, observation period: {self.observation_period})"
            )

        if at_time is None:
            at_time = now

        cache_key = self.frame_builder.new_frame(at_time).cache_key(bucket_key, self.observation_period)

        result = self.counter_cache.increment(
            self.namespace, cache_key, self.observation_period, step
        )

        if result.ok:
            logger.debug("Counter incremented", key=cache_key, step=step, value=result.value)
        else:
            logger.warning("Counter increment failed", key=cache_key, step=step, error=result.error)

        return result

    def _raw_frames(
        self, bucket_key: str, start_time: Optional[int] = None, end_time: Optional[int] = None
    ) -> Iterator[Frame]:
        """Frames between two timestamps with their material values attached

        Leaving out the start time skips the leading frames without a value,
        so that the undefined region before the first increment doesn't skew
        the statistics.
        """
        frames = self.frame_builder.generate_frames(0 if start_time is None else start_time, end_time)

        return self._fetch(bucket_key, frames, skip_leading_nulls=start_time is None)

    def _fetch(self, bucket_key: str, frames: Iterator[Frame], skip_leading_nulls: bool) -> Iterator[Frame]:
        leading = skip_leading_nulls

        for frame in frames:
            frame.set_value(
                self.counter_cache.get(
                    self.namespace, frame.cache_key(bucket_key, self.observation_period)
                )
            )

            if leading and frame.has_null_value():
                continue
            leading = False

            yield frame

    def time_series(
        self, bucket_key: str, start_time: Optional[int] = None, end_time: Optional[int] = None
    ) -> Iterator[tuple[int, float]]:
        """Extrapolated discrete-time values between two timestamps

        Args:
            bucket_key: The bucket key
            start_time: The optional start time; leaving it out omits the leading empty frames
            end_time: The optional end time; defaults to the current time

        Returns:
            Lazy iterator of ``(timestamp, value)`` pairs in ascending time order

        Raises:
            InvalidRange: If the range is empty or starts in the future
        """
        # The end time may be in the past, so the most recent bucket is decided by the clock
        now = self.clock.now()

        return self._extrapolate(self._raw_frames(bucket_key, start_time, end_time), now)

    def _extrapolate(self, frames: Iterator[Frame], now: int) -> Iterator[tuple[int, float]]:
        previous: Optional[Frame] = None

        for frame in frames:
            if previous is None:
                # The oldest frame only seeds the previous bucket, extrapolating it aliases
                previous = frame
                continue

            total = 0.0

            for bucket_start, seconds in frame.frame_overlap().items():
                if bucket_start == previous.start:
                    total += previous.value * seconds / self.window_size
                elif frame.start + seconds >= now:
                    # Most recent bucket is still filling up, take it whole
                    total += frame.value
                else:
                    total += frame.value * seconds / self.window_size

            yield frame.time, total

            previous = frame

    def latest_value(self, bucket_key: str) -> float:
        """The latest extrapolated value for a bucket key, 0.0 without data"""
        latest = 0.0
        for _, value in self.time_series(bucket_key, self.clock.now() - self.window_size):
            latest = value
        return latest

    def historic_variance(
        self, bucket_key: str, start_time: Optional[int] = None, end_time: Optional[int] = None
    ) -> RunningVariance:
        """Statistics of the time series, leaving out its most recent point

        The most recent point is the one tested for anomalies, so it's kept
        out of the baseline.

        Args:
            bucket_key: The bucket key
            start_time: The optional start time; defaults to the first non-empty frame
            end_time: The optional end time; defaults to the current time
        """
        variance = RunningVariance()

        pending: Optional[float] = None
        for _, value in self.time_series(bucket_key, start_time, end_time):
            if pending is not None:
                variance.observe(pending)
            pending = value

        return variance

    def detect_anomaly(
        self, bucket_key: str, sensitivity: int = 2, start_time: Optional[int] = None
    ) -> AnomalyDetectionResult:
        """Test the latest value against the historic distribution

        Args:
            bucket_key: The bucket key
            sensitivity: 3 = low (99.7%), 2 = standard (95%), 1 = high (68% deviation triggers alert)
            start_time: The optional start time; leaving it out omits the leading empty frames
        """
        variance = self.historic_variance(bucket_key, start_time)

        result = AnomalyDetectionResult(
            variance.standard_deviation,
            variance.mean,
            self.latest_value(bucket_key),
            sensitivity,
        )

        if result.is_anomaly():
            logger.info(
                "Anomaly detected",
                namespace=self.namespace,
                bucket_key=bucket_key,
                direction=result.direction.value,
                latest=round(result.latest, 2),
                mean=round(result.mean, 2),
                hops=round(result.hops, 2),
            )

        return result
