"""
Statistical snapshot of a histogram or timer sample population.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Tuple


@dataclass(frozen=True)
class Snapshot:
    """
    Sorted sample values captured at one instant.

    Quantiles interpolate between neighbouring samples at position
    ``q * (n + 1)``, clamped to the first and last sample. An empty snapshot
    reports 0.0 for every statistic.
    """

    values: Tuple[float, ...] = ()

    @classmethod
    def of(cls, values: Iterable[float]) -> "Snapshot":
        return cls(tuple(sorted(values)))

    def __len__(self) -> int:
        return len(self.values)

    def value(self, quantile: float) -> float:
        if not 0.0 <= quantile <= 1.0 or math.isnan(quantile):
            raise ValueError(f"{quantile} is not in [0..1]")
        if not self.values:
            return 0.0

        pos = quantile * (len(self.values) + 1)
        if pos < 1:
            return float(self.values[0])
        if pos >= len(self.values):
            return float(self.values[-1])

        index = int(pos)
        lower = self.values[index - 1]
        upper = self.values[index]
        return float(lower + (pos - math.floor(pos)) * (upper - lower))

    @property
    def median(self) -> float:
        return self.value(0.5)

    @property
    def min(self) -> float:
        return float(self.values[0]) if self.values else 0.0

    @property
    def max(self) -> float:
        return float(self.values[-1]) if self.values else 0.0

    @property
    def mean(self) -> float:
        if not self.values:
            return 0.0
        return math.fsum(self.values) / len(self.values)

    @property
    def stddev(self) -> float:
        # sample standard deviation
        if len(self.values) <= 1:
            return 0.0
        mean = self.mean
        variance = math.fsum((v - mean) ** 2 for v in self.values) / (len(self.values) - 1)
        return math.sqrt(variance)
