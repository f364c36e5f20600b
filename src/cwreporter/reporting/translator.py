"""
Translates metric samples into CloudWatch data points.

Dispatch is on the sample's MetricKind. A timer is handled explicitly as a
meter (its rates) followed by a histogram of its durations, converted from
nanoseconds into the configured duration unit.
"""

import logging
import math
import numbers
from datetime import datetime
from typing import List, Sequence, Set

from ..config.reporter_config import ReportConfiguration
from ..models import (
    MAX_DIMENSIONS,
    DataPoint,
    Dimension,
    MeterData,
    MetricKind,
    MetricSample,
    Snapshot,
    StandardUnit,
    TimeUnit,
)
from ..runtime import RuntimeStats
from .once import OnceFlags
from .sanitizer import ValueSanitizer

logger = logging.getLogger(__name__)

# Meter rates are always computed per second; event type is assumed to be calls.
RATE_TIME_UNIT = TimeUnit.SECONDS
METER_EVENT_TYPE = "calls"
METER_UNIT_DIMENSION = "meterUnit"

# Timer durations are recorded in nanoseconds.
TIMER_RECORDING_UNIT = TimeUnit.NANOSECONDS


class DataPointTranslator:
    """
    Produces the configured subset of data points for one metric.

    The translator owns the per-reporter one-time warnings (unsendable gauge
    types, dimension overflow, NaN values), so one instance should live as
    long as its reporter.
    """

    def __init__(self, config: ReportConfiguration, sanitizer: ValueSanitizer = None):
        self.config = config
        self.sanitizer = sanitizer or ValueSanitizer()
        self._once = OnceFlags()
        self._unsendable: Set[str] = set()
        self._duration_unit = config.duration_unit.to_standard_unit()

    def translate(
        self,
        sample: MetricSample,
        dimensions: Sequence[Dimension],
        timestamp: datetime,
    ) -> List[DataPoint]:
        """
        Translate one metric sample.

        Args:
            sample: The metric's state this cycle.
            dimensions: Dimensions from every provider, in provider order.
            timestamp: Timestamp shared by the whole report cycle.

        Returns:
            Data points in emission order; empty for unsendable gauges.
        """
        points: List[DataPoint] = []
        name = sample.name
        data = sample.data

        if sample.kind is MetricKind.GAUGE:
            self._gauge(points, name, data.value, dimensions, timestamp)
        elif sample.kind is MetricKind.COUNTER:
            self._add(points, timestamp, name, data.count, StandardUnit.COUNT, dimensions)
        elif sample.kind is MetricKind.METER:
            self._metered(points, name, data, dimensions, timestamp)
        elif sample.kind is MetricKind.HISTOGRAM:
            self._distribution(
                points, name, data.snapshot, dimensions, timestamp,
                unit=StandardUnit.NONE,
                lifetime=self.config.send_histogram_lifetime_summary,
                as_duration=False,
            )
        elif sample.kind is MetricKind.TIMER:
            self._metered(points, name, data.meter, dimensions, timestamp)
            self._distribution(
                points, name, data.snapshot, dimensions, timestamp,
                unit=self._duration_unit,
                lifetime=self.config.send_timer_lifetime_summary,
                as_duration=True,
            )
        return points

    def translate_runtime(
        self,
        stats: RuntimeStats,
        dimensions: Sequence[Dimension],
        timestamp: datetime,
    ) -> List[DataPoint]:
        """Translate process-runtime figures according to the jvm options."""
        points: List[DataPoint] = []
        config = self.config

        if config.send_jvm_memory:
            self._add(points, timestamp, "jvm.memory.heap_usage", stats.heap_usage,
                      StandardUnit.PERCENT, dimensions)
            self._add(points, timestamp, "jvm.memory.non_heap_usage", stats.non_heap_usage,
                      StandardUnit.PERCENT, dimensions)

        if config.send_jvm_thread_state:
            self._add(points, timestamp, "jvm.thread_count", stats.thread_count,
                      StandardUnit.COUNT, dimensions)
            self._add(points, timestamp, "jvm.daemon_thread_count", stats.daemon_thread_count,
                      StandardUnit.COUNT, dimensions)
            for state, count in stats.thread_states.items():
                self._add(points, timestamp, f"jvm.thread-states.{state.value}", count,
                          StandardUnit.COUNT, dimensions)

        if config.send_jvm_gc:
            for collector, gc_stats in sorted(stats.garbage_collectors.items()):
                self._add(points, timestamp, f"jvm.gc.{collector}.time",
                          gc_stats.get_time(config.duration_unit), self._duration_unit, dimensions)
                self._add(points, timestamp, f"jvm.gc.{collector}.runs", gc_stats.runs,
                          StandardUnit.COUNT, dimensions)

        return points

    def _gauge(self, points, name, value, dimensions, timestamp) -> None:
        if name in self._unsendable:
            return
        if isinstance(value, numbers.Real) and not isinstance(value, bool):
            self._add(points, timestamp, name, value, StandardUnit.NONE, dimensions)
        else:
            self._unsendable.add(name)
            type_name = "None" if value is None else type(value).__name__
            logger.warning(
                f"The type of the value for {name} is {type_name}. "
                f"It must be a real number to send to CloudWatch."
            )

    def _metered(self, points, name, meter: MeterData, dimensions, timestamp) -> None:
        config = self.config
        dimensions = list(dimensions)

        # The count is not a rate, so it goes out before the unit dimension is added.
        if config.send_meter_summary:
            self._add(points, timestamp, f"{name}.count", meter.count, StandardUnit.COUNT, dimensions)

        # CloudWatch has no unit for arbitrary rates; carry it as a dimension instead.
        dimensions.append(
            Dimension(METER_UNIT_DIMENSION, f"{METER_EVENT_TYPE}/{RATE_TIME_UNIT.singular}")
        )
        if config.send_one_minute_rate:
            self._add(points, timestamp, f"{name}.1MinuteRate", meter.one_minute_rate,
                      StandardUnit.NONE, dimensions)
        if config.send_five_minute_rate:
            self._add(points, timestamp, f"{name}.5MinuteRate", meter.five_minute_rate,
                      StandardUnit.NONE, dimensions)
        if config.send_fifteen_minute_rate:
            self._add(points, timestamp, f"{name}.15MinuteRate", meter.fifteen_minute_rate,
                      StandardUnit.NONE, dimensions)
        if config.send_meter_summary:
            self._add(points, timestamp, f"{name}.meanRate", meter.mean_rate,
                      StandardUnit.NONE, dimensions)

    def _distribution(
        self,
        points,
        name: str,
        snapshot: Snapshot,
        dimensions,
        timestamp,
        unit: StandardUnit,
        lifetime: bool,
        as_duration: bool,
    ) -> None:
        convert = self._to_duration_unit if as_duration else float

        for percentile in self.config.percentiles:
            if percentile == 0.5:
                self._add(points, timestamp, f"{name}.median", convert(snapshot.median), unit, dimensions)
            else:
                self._add(points, timestamp, f"{name}_percentile_{percentile!r}",
                          convert(snapshot.value(percentile)), unit, dimensions)

        if lifetime:
            self._add(points, timestamp, f"{name}.min", convert(snapshot.min), unit, dimensions)
            self._add(points, timestamp, f"{name}.max", convert(snapshot.max), unit, dimensions)
            self._add(points, timestamp, f"{name}.mean", convert(snapshot.mean), unit, dimensions)
            self._add(points, timestamp, f"{name}.stddev", convert(snapshot.stddev), unit, dimensions)

    def _to_duration_unit(self, nanos: float) -> float:
        if math.isnan(nanos):
            return nanos
        return float(self.config.duration_unit.convert(int(nanos), TIMER_RECORDING_UNIT))

    def _add(self, points, timestamp, name, value, unit, dimensions) -> None:
        value = self.sanitizer.sanitize(name, value)
        if math.isnan(value):
            if self._once.first(("nan", name)):
                logger.warning(f"Value for {name} is NaN; CloudWatch does not accept it, skipping.")
            return

        dimensions = tuple(dimensions)
        if len(dimensions) > MAX_DIMENSIONS:
            if self._once.first("too_many_dimensions"):
                logger.warning(
                    f"{name} has {len(dimensions)} dimensions; CloudWatch accepts at most "
                    f"{MAX_DIMENSIONS}, so only the first {MAX_DIMENSIONS} are sent. "
                    f"Further overflows won't be logged."
                )
            dimensions = dimensions[:MAX_DIMENSIONS]

        points.append(DataPoint(name, timestamp, value, unit, dimensions))
