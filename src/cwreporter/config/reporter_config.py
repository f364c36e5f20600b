"""
Reporter configuration model.

This module defines the ReportConfiguration dataclass which holds every
option that shapes what a report cycle sends. It is frozen: a reporter is
built from one instance and the options cannot change while it runs.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from ..dimensions.base import DimensionProvider, MetricFilter, match_all
from ..models import TimeUnit
from ..validation import (
    ValidationError,
    validate_namespace,
    validate_percentiles,
    validate_positive_float,
)

DEFAULT_PERCENTILES: Tuple[float, ...] = (0.5, 0.95, 0.99)


@dataclass(frozen=True)
class ReportConfiguration:
    """
    Options for one reporter.

    CloudWatch charges per unique metric, so the defaults are parsimonious:
    the median, 95th and 99th percentiles for histograms and timers, the one
    minute rate for meters and timers, and process memory usage.

    Attributes:
        namespace: CloudWatch namespace all points are sent under.
        percentiles: Quantiles sent for histograms and timers; 0.5 is sent
            as ``median``.
        send_one_minute_rate: Send ``.1MinuteRate`` for meters and timers.
        send_five_minute_rate: Send ``.5MinuteRate`` for meters and timers.
        send_fifteen_minute_rate: Send ``.15MinuteRate`` for meters and timers.
        send_meter_summary: Send ``.count`` and ``.meanRate`` for meters and timers.
        send_timer_lifetime_summary: Send min/max/mean/stddev for timers.
        send_histogram_lifetime_summary: Send min/max/mean/stddev for histograms.
        send_jvm_memory: Send process heap and non-heap usage.
        send_jvm_thread_state: Send process thread counts and states.
        send_jvm_gc: Send garbage collector run counts and times.
        duration_unit: Unit timer durations and gc times are sent in.
        rate_unit: Unit rates are expressed per.
        send_to_cloudwatch: When False, points are logged instead of sent.
        period_seconds: Delay between scheduled report cycles.
        dimension_providers: Providers consulted in order for every point.
        metric_filter: Only matching metrics are reported.
    """

    namespace: str
    percentiles: Tuple[float, ...] = DEFAULT_PERCENTILES
    send_one_minute_rate: bool = True
    send_five_minute_rate: bool = False
    send_fifteen_minute_rate: bool = False
    send_meter_summary: bool = False
    send_timer_lifetime_summary: bool = False
    send_histogram_lifetime_summary: bool = False
    send_jvm_memory: bool = True
    send_jvm_thread_state: bool = False
    send_jvm_gc: bool = False
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS
    rate_unit: TimeUnit = TimeUnit.SECONDS
    send_to_cloudwatch: bool = True
    period_seconds: float = 60.0
    dimension_providers: Tuple[DimensionProvider, ...] = field(default_factory=tuple)
    metric_filter: MetricFilter = match_all

    def __post_init__(self):
        validate_namespace(self.namespace)
        object.__setattr__(self, "percentiles", validate_percentiles(self.percentiles))
        object.__setattr__(self, "dimension_providers", tuple(self.dimension_providers))
        validate_positive_float(self.period_seconds, min_value=0.001, field_name="period_seconds")
        if self.duration_unit.to_standard_unit() is None:
            raise ValidationError(
                f"duration_unit must be one of SECONDS, MILLISECONDS or MICROSECONDS to be "
                f"sent to CloudWatch, got {self.duration_unit.name}",
                field_name="duration_unit",
                value=self.duration_unit,
            )

    _BOOL_KEYS = (
        "send_one_minute_rate",
        "send_five_minute_rate",
        "send_fifteen_minute_rate",
        "send_meter_summary",
        "send_timer_lifetime_summary",
        "send_histogram_lifetime_summary",
        "send_jvm_memory",
        "send_jvm_thread_state",
        "send_jvm_gc",
        "send_to_cloudwatch",
    )

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any], **extra: Any) -> "ReportConfiguration":
        """
        Create a ReportConfiguration from plain values, e.g. a TOML table.

        Units are given by name (``"seconds"``, ``"Milliseconds"``). Keys not
        present fall back to the defaults.

        Args:
            config_dict: Dictionary of option values.
            **extra: Non-serializable options such as dimension_providers.

        Returns:
            ReportConfiguration instance

        Raises:
            ValidationError: If a value is invalid.
        """
        kwargs: Dict[str, Any] = {"namespace": config_dict.get("namespace")}

        if "percentiles" in config_dict:
            kwargs["percentiles"] = config_dict["percentiles"]
        for key in cls._BOOL_KEYS:
            if key in config_dict:
                value = config_dict[key]
                if not isinstance(value, bool):
                    raise ValidationError(
                        f"{key} must be true or false, got {value!r}",
                        field_name=key,
                        value=value,
                    )
                kwargs[key] = value
        for key in ("duration_unit", "rate_unit"):
            if key in config_dict:
                try:
                    kwargs[key] = TimeUnit.from_name(config_dict[key])
                except ValueError as e:
                    raise ValidationError(str(e), field_name=key, value=config_dict[key]) from e
        if "period_seconds" in config_dict:
            kwargs["period_seconds"] = validate_positive_float(
                config_dict["period_seconds"], min_value=0.001, field_name="period_seconds"
            )

        kwargs.update(extra)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the serializable options to a dictionary.

        Dimension providers and the metric filter are left out.
        """
        result: Dict[str, Any] = {
            "namespace": self.namespace,
            "percentiles": list(self.percentiles),
        }
        for key in self._BOOL_KEYS:
            result[key] = getattr(self, key)
        result["duration_unit"] = self.duration_unit.name.lower()
        result["rate_unit"] = self.rate_unit.name.lower()
        result["period_seconds"] = self.period_seconds
        return result
