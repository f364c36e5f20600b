"""
Metric samples handed to the reporter by a metrics registry.

A MetricSample is a tagged variant: the `kind` says which payload type `data`
holds. Timers carry both a meter payload and a duration snapshot so that the
translator can apply the rate rules and the distribution rules explicitly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .snapshot import Snapshot


class MetricKind(Enum):
    """The five metric families, in the order they are reported."""

    GAUGE = "gauge"
    COUNTER = "counter"
    HISTOGRAM = "histogram"
    METER = "meter"
    TIMER = "timer"


@dataclass(frozen=True)
class GaugeData:
    # Any type; only real numbers are sendable.
    value: Any


@dataclass(frozen=True)
class CounterData:
    count: int


@dataclass(frozen=True)
class HistogramData:
    count: int
    snapshot: Snapshot


@dataclass(frozen=True)
class MeterData:
    """Event count and exponentially-weighted rates, in events per second."""

    count: int
    one_minute_rate: float = 0.0
    five_minute_rate: float = 0.0
    fifteen_minute_rate: float = 0.0
    mean_rate: float = 0.0


@dataclass(frozen=True)
class TimerData:
    """Rates of a timer plus its duration snapshot in nanoseconds."""

    meter: MeterData
    snapshot: Snapshot


MetricData = Union[GaugeData, CounterData, HistogramData, MeterData, TimerData]

_PAYLOAD_TYPES = {
    MetricKind.GAUGE: GaugeData,
    MetricKind.COUNTER: CounterData,
    MetricKind.HISTOGRAM: HistogramData,
    MetricKind.METER: MeterData,
    MetricKind.TIMER: TimerData,
}


@dataclass(frozen=True)
class MetricSample:
    """
    One metric's state for a single report cycle.

    Attributes:
        name: Registry name of the metric.
        kind: Which family the metric belongs to.
        data: Kind-specific payload.

    Raises:
        TypeError: If `data` does not match `kind`.
    """

    name: str
    kind: MetricKind
    data: MetricData

    def __post_init__(self):
        expected = _PAYLOAD_TYPES[self.kind]
        if not isinstance(self.data, expected):
            raise TypeError(
                f"{self.kind.value} sample '{self.name}' needs {expected.__name__}, "
                f"got {type(self.data).__name__}"
            )

    @classmethod
    def gauge(cls, name: str, value: Any) -> "MetricSample":
        return cls(name, MetricKind.GAUGE, GaugeData(value))

    @classmethod
    def counter(cls, name: str, count: int) -> "MetricSample":
        return cls(name, MetricKind.COUNTER, CounterData(count))

    @classmethod
    def histogram(cls, name: str, snapshot: Snapshot, count: Optional[int] = None) -> "MetricSample":
        return cls(
            name,
            MetricKind.HISTOGRAM,
            HistogramData(len(snapshot) if count is None else count, snapshot),
        )

    @classmethod
    def meter(cls, name: str, meter: MeterData) -> "MetricSample":
        return cls(name, MetricKind.METER, meter)

    @classmethod
    def timer(cls, name: str, meter: MeterData, snapshot: Snapshot) -> "MetricSample":
        return cls(name, MetricKind.TIMER, TimerData(meter, snapshot))
