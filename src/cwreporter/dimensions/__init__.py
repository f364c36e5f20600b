"""
Dimension providers attach tags such as the host identity to data points.
"""

from .base import DimensionProvider, MetricFilter, match_all
from .instance_id import (
    DIMENSION_NAME,
    METADATA_URL,
    UNKNOWN_INSTANCE_ID,
    InstanceIdProvider,
)
from .static import StaticDimensionProvider

__all__ = [
    "DimensionProvider",
    "MetricFilter",
    "match_all",
    "DIMENSION_NAME",
    "METADATA_URL",
    "UNKNOWN_INSTANCE_ID",
    "InstanceIdProvider",
    "StaticDimensionProvider",
]
