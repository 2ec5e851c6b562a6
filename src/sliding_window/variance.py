"""
Online mean and variance using Welford's algorithm.

See https://en.wikipedia.org/wiki/Algorithms_for_calculating_variance#Welford's_online_algorithm
"""

import math
from typing import Iterable


class RunningVariance:
    """Numerically stable running mean and sample variance"""

    def __init__(self):
        self.count = 0
        self._mean = 0.0
        self._m2 = 0.0  # Sum of squares of differences from the mean

    def observe(self, value: float) -> None:
        self.count += 1
        delta = value - self._mean
        self._mean += delta / self.count
        self._m2 += delta * (value - self._mean)

    def observe_all(self, values: Iterable[float]) -> "RunningVariance":
        for value in values:
            self.observe(value)
        return self

    @property
    def mean(self) -> float:
        """Mean of the samples, NaN when there are none"""
        if self.count == 0:
            return math.nan
        return self._mean

    @property
    def variance(self) -> float:
        """Sample variance, NaN with fewer than two samples"""
        if self.count < 2:
            return math.nan
        return self._m2 / (self.count - 1)

    @property
    def standard_deviation(self) -> float:
        return math.sqrt(self.variance)

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "mean": self.mean,
            "std_dev": self.standard_deviation,
        }

    def __repr__(self) -> str:
        return f"RunningVariance(count={self.count}, mean={self.mean}, std_dev={self.standard_deviation})"
