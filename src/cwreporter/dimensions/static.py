"""
Dimension provider with fixed values, e.g. an environment or service name.
"""

from typing import Dict, List

from ..models import Dimension, MetricSample
from .base import DimensionProvider, MetricFilter, match_all


class StaticDimensionProvider(DimensionProvider):
    """Attaches the same dimensions to every matching metric."""

    def __init__(self, dimensions: Dict[str, str], metric_filter: MetricFilter = match_all):
        self._dimensions = [Dimension(str(k), str(v)) for k, v in dimensions.items()]
        self._filter = metric_filter

    def dimensions_for(self, name: str, sample: MetricSample) -> List[Dimension]:
        if not self._filter(name, sample):
            return []
        return list(self._dimensions)

    def runtime_dimensions(self) -> List[Dimension]:
        return list(self._dimensions)

    def __repr__(self) -> str:
        return f"StaticDimensionProvider({self._dimensions!r})"
