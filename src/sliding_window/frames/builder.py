"""
Frame range generation, clamped to the observation period.
"""

from typing import Iterator, Optional

import structlog

from ..clock import Clock
from ..exceptions import InvalidRange
from .frame import Frame

logger = structlog.get_logger(__name__)


class FrameBuilder:
    """Builds frames for a fixed window size and observation period"""

    def __init__(self, window_size: int, observation_period: int, clock: Clock):
        self.window_size = window_size
        self.observation_period = observation_period
        self.clock = clock

    def new_frame(self, time: int) -> Frame:
        return Frame(time, self.window_size)

    def generate_frames(self, start_time: int = 0, end_time: Optional[int] = None) -> Iterator[Frame]:
        """Generate the frames covering a time range

        Frames keep the phase of the requested start time: each one sits
        ``start_time % window_size`` seconds into its bucket. The range is
        clamped to the buckets still alive in the cache.

        Args:
            start_time: The start time
            end_time: The optional end time; defaults to the current time

        Returns:
            Lazy iterator over at least one frame, in ascending time order

        Raises:
            InvalidRange: If the end time precedes the start time, or the
                start time is in the future
        """
        if end_time is not None and end_time < start_time:
            raise InvalidRange(
                f"End time cannot be before start time (start: {start_time}, end: {end_time})"
            )

        now = self.clock.now()
        if end_time is None:
            end_time = now

        if start_time > end_time:
            raise InvalidRange(
                f"Start time cannot be in the future (start: {start_time}, end: {end_time})"
            )

        # Buckets older than this have already expired from the cache
        horizon = now - self.observation_period
        start_time = max(start_time, horizon)

        boundary = start_time % self.window_size
        start_time -= boundary

        # Increments don't extend the expiry, so this bucket is already gone
        if start_time < horizon:
            start_time += self.window_size

        logger.debug(
            "Generating frames",
            start=start_time,
            end=end_time,
            boundary=boundary,
            window_size=self.window_size,
        )

        return self._frames(start_time, end_time, boundary)

    def _frames(self, cursor: int, end_time: int, boundary: int) -> Iterator[Frame]:
        while True:
            yield self.new_frame(cursor + boundary)
            cursor += self.window_size
            if cursor > end_time:
                break
