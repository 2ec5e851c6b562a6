"""
Errors raised by the sliding window counter.
"""


class SlidingWindowError(Exception):
    """Base class for all counter errors"""


class ConfigurationError(SlidingWindowError, ValueError):
    """Invalid counter configuration (blank namespace, non-positive sizes)"""


class InvalidRange(SlidingWindowError, ValueError):
    """Requested time range is empty or starts in the future"""


class TooFarInPast(SlidingWindowError, ValueError):
    """Increment requested before the retention horizon"""
