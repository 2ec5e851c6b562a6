"""
Z-score style anomaly classification of the latest counter value.
"""

import math
from dataclasses import dataclass, field
from enum import Enum


class Direction(Enum):
    """Direction of the anomaly"""

    NONE = "none"
    UP = "up"
    DOWN = "down"


@dataclass
class AnomalyDetectionResult:
    """Result of the anomaly detection

    The latest value is anomalous when it falls outside
    ``[floor(mean - sensitivity * std_dev), ceil(mean + sensitivity * std_dev)]``.
    Its score (``hops``) is the distance from the mean in standard deviations;
    with a zero standard deviation an out-of-bounds value is flagged but scored 0.
    Undefined statistics (not enough history) never produce an anomaly.
    """

    std_dev: float
    mean: float
    latest: float
    sensitivity: int
    low: float = field(init=False)
    high: float = field(init=False)
    direction: Direction = field(init=False, default=Direction.NONE)
    hops: float = field(init=False, default=0.0)

    def __post_init__(self):
        high = self.mean + self.sensitivity * self.std_dev
        low = self.mean - self.sensitivity * self.std_dev

        if math.isnan(high) or math.isnan(low):
            self.high = self.low = math.nan
            return

        self.high = float(math.ceil(high))
        self.low = float(math.floor(low))

        if self.low <= self.latest <= self.high:
            return

        if self.std_dev > 0.0:
            self.hops = abs(self.mean - self.latest) / self.std_dev

        if self.latest < self.low:
            self.direction = Direction.DOWN
        elif self.latest > self.high:
            self.direction = Direction.UP

    def is_anomaly(self) -> bool:
        return self.direction is not Direction.NONE

    def to_dict(self, precision: int = 2) -> dict:
        """Convert to dictionary for serialization

        Args:
            precision: Number of decimal digits floats are rounded to
        """
        return {
            "std_dev": round(self.std_dev, precision),
            "mean": round(self.mean, precision),
            "sensitivity": self.sensitivity,
            "low": round(self.low, precision),
            "high": round(self.high, precision),
            "latest": round(self.latest, precision),
            "direction": self.direction.value,
            "hops": round(self.hops, precision),
        }
