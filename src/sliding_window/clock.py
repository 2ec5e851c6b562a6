"""
Time sources for the counter.
"""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Source of the current unix time in whole seconds"""

    @abstractmethod
    def now(self) -> int:
        pass


class SystemClock(Clock):
    """Wall clock time"""

    def now(self) -> int:
        return int(time.time())
