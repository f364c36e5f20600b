"""
Data models for the reporter.

Wire models:
- DataPoint, Dimension and StandardUnit as sent to CloudWatch

Metric models:
- MetricSample and its per-kind payloads, read from a metrics registry
- Snapshot for histogram and timer distributions
- TimeUnit for exact duration conversion
"""

from .datapoint import MAX_DIMENSIONS, DataPoint, Dimension, StandardUnit
from .metrics import (
    CounterData,
    GaugeData,
    HistogramData,
    MeterData,
    MetricKind,
    MetricSample,
    TimerData,
)
from .snapshot import Snapshot
from .units import TimeUnit

__all__ = [
    "MAX_DIMENSIONS",
    "DataPoint",
    "Dimension",
    "StandardUnit",
    "CounterData",
    "GaugeData",
    "HistogramData",
    "MeterData",
    "MetricKind",
    "MetricSample",
    "TimerData",
    "Snapshot",
    "TimeUnit",
]
