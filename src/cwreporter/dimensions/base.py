"""
Defines the interface for dimension providers.

A dimension provider contributes zero or more dimensions to every data point
of a metric, and to the process-runtime points of each cycle.
"""

from abc import ABC, abstractmethod
from typing import Callable, List

from ..models import Dimension, MetricSample

MetricFilter = Callable[[str, MetricSample], bool]
"""Predicate deciding whether a metric takes part in something."""


def match_all(name: str, sample: MetricSample) -> bool:
    """Filter that accepts every metric."""
    return True


class DimensionProvider(ABC):
    """
    Abstract base class for dimension providers.

    Providers are called in registration order and their dimensions are
    concatenated, so the order they are added to a builder is the order the
    dimensions appear on each data point.
    """

    @abstractmethod
    def dimensions_for(self, name: str, sample: MetricSample) -> List[Dimension]:
        """
        Returns the dimensions to attach to every point of one metric.

        Args:
            name: Registry name of the metric.
            sample: The metric's sample for this cycle.
        """
        pass

    @abstractmethod
    def runtime_dimensions(self) -> List[Dimension]:
        """Returns the dimensions to attach to process-runtime points."""
        pass
