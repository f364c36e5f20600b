"""
Fluent builder for CloudWatchReporter.

Example:
    reporter = (
        ReporterBuilder("my-service", CloudWatchIngestionClient())
        .with_registry(registry)
        .with_percentiles(0.5, 0.99)
        .with_five_minute_rate(True)
        .with_ec2_instance_id_dimension()
        .build()
    )
    reporter.start()
"""

import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..adapters.ports import IngestionClient, MetricsRegistry
from ..dimensions import (
    DimensionProvider,
    InstanceIdProvider,
    MetricFilter,
    StaticDimensionProvider,
    match_all,
)
from ..models import TimeUnit
from ..reporting.reporter import CloudWatchReporter
from ..reporting.sanitizer import ValueSanitizer
from ..runtime import RuntimeMetrics
from .loader import load_reporter_table
from .reporter_config import ReportConfiguration
from .validators import validate_reporter_config

logger = logging.getLogger(__name__)


class ReporterBuilder:
    """
    Collects reporter options; build() freezes them into a ReportConfiguration.

    Every ``with_*`` method returns the builder. Options are validated when
    build() is called, not when they are set.
    """

    def __init__(self, namespace: str, client: IngestionClient):
        self.client = client
        self._options: Dict[str, Any] = {"namespace": namespace}
        self._providers: List[DimensionProvider] = []
        self._registry: Optional[MetricsRegistry] = None
        self._runtime_metrics: Optional[RuntimeMetrics] = None
        self._sanitizer: Optional[ValueSanitizer] = None

    @classmethod
    def from_config(cls, config: ReportConfiguration, client: IngestionClient) -> "ReporterBuilder":
        """Start from an existing configuration, e.g. one loaded from TOML."""
        builder = cls(config.namespace, client)
        for f in fields(config):
            if f.name != "dimension_providers":
                builder._options[f.name] = getattr(config, f.name)
        builder._providers.extend(config.dimension_providers)
        return builder

    @classmethod
    def from_toml(cls, path: Union[str, Path], client: IngestionClient) -> "ReporterBuilder":
        """
        Start from the ``[reporter]`` table of a TOML file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValidationError: If the table is missing or invalid.
        """
        config = validate_reporter_config(load_reporter_table(path))
        return cls.from_config(config, client)

    def with_percentiles(self, *percentiles: float) -> "ReporterBuilder":
        """Quantiles to send for histograms and timers; none disables them."""
        self._options["percentiles"] = tuple(percentiles)
        return self

    def with_one_minute_rate(self, enabled: bool = True) -> "ReporterBuilder":
        self._options["send_one_minute_rate"] = enabled
        return self

    def with_five_minute_rate(self, enabled: bool = True) -> "ReporterBuilder":
        self._options["send_five_minute_rate"] = enabled
        return self

    def with_fifteen_minute_rate(self, enabled: bool = True) -> "ReporterBuilder":
        self._options["send_fifteen_minute_rate"] = enabled
        return self

    def with_meter_summary(self, enabled: bool = True) -> "ReporterBuilder":
        """Send ``.count`` and ``.meanRate`` for meters and timers."""
        self._options["send_meter_summary"] = enabled
        return self

    def with_timer_summary(self, enabled: bool = True) -> "ReporterBuilder":
        """Send min/max/mean/stddev for timers."""
        self._options["send_timer_lifetime_summary"] = enabled
        return self

    def with_histogram_summary(self, enabled: bool = True) -> "ReporterBuilder":
        """Send min/max/mean/stddev for histograms."""
        self._options["send_histogram_lifetime_summary"] = enabled
        return self

    def with_jvm_memory(self, enabled: bool = True) -> "ReporterBuilder":
        self._options["send_jvm_memory"] = enabled
        return self

    def with_jvm_thread_state(self, enabled: bool = True) -> "ReporterBuilder":
        self._options["send_jvm_thread_state"] = enabled
        return self

    def with_jvm_gc(self, enabled: bool = True) -> "ReporterBuilder":
        self._options["send_jvm_gc"] = enabled
        return self

    def with_duration_unit(self, unit: Union[TimeUnit, str]) -> "ReporterBuilder":
        self._options["duration_unit"] = unit if isinstance(unit, TimeUnit) else TimeUnit.from_name(unit)
        return self

    def with_rate_unit(self, unit: Union[TimeUnit, str]) -> "ReporterBuilder":
        self._options["rate_unit"] = unit if isinstance(unit, TimeUnit) else TimeUnit.from_name(unit)
        return self

    def with_cloudwatch_enabled(self, enabled: bool = True) -> "ReporterBuilder":
        """When disabled, points are logged at info level instead of sent."""
        self._options["send_to_cloudwatch"] = enabled
        return self

    def with_delay(self, period_seconds: float) -> "ReporterBuilder":
        """Delay between scheduled report cycles."""
        self._options["period_seconds"] = period_seconds
        return self

    def with_filter(self, metric_filter: MetricFilter) -> "ReporterBuilder":
        self._options["metric_filter"] = metric_filter
        return self

    def with_registry(self, registry: MetricsRegistry) -> "ReporterBuilder":
        self._registry = registry
        return self

    def with_runtime_metrics(self, runtime_metrics: RuntimeMetrics) -> "ReporterBuilder":
        """Share one RuntimeMetrics between reporters; the reporter won't close it."""
        self._runtime_metrics = runtime_metrics
        return self

    def with_clamp_bounds(self, smallest: float, largest: float) -> "ReporterBuilder":
        """Override the magnitude range values are clamped into."""
        self._sanitizer = ValueSanitizer(smallest, largest)
        return self

    def with_dimension_provider(self, provider: DimensionProvider) -> "ReporterBuilder":
        self._providers.append(provider)
        return self

    def with_dimensions(self, dimensions: Dict[str, str], metric_filter: MetricFilter = match_all) -> "ReporterBuilder":
        """Attach fixed dimensions to matching metrics and to runtime points."""
        return self.with_dimension_provider(StaticDimensionProvider(dimensions, metric_filter))

    def with_ec2_instance_id_dimension(self, metric_filter: MetricFilter = match_all, **kwargs: Any) -> "ReporterBuilder":
        """
        Attach the EC2 instance id, looked up from the instance metadata service.

        Args:
            metric_filter: Only matching metrics receive the dimension.
            **kwargs: Passed to InstanceIdProvider (url, timeout, retry_interval, ...).
        """
        return self.with_dimension_provider(InstanceIdProvider(metric_filter, **kwargs))

    def with_instance_id_dimension(self, instance_id: str, metric_filter: MetricFilter = match_all) -> "ReporterBuilder":
        """Attach a fixed ``InstanceId`` dimension; no metadata lookup is made."""
        return self.with_dimension_provider(InstanceIdProvider(metric_filter, instance_id=instance_id))

    def build_config(self) -> ReportConfiguration:
        """
        Raises:
            ValidationError: If an option is invalid.
        """
        return ReportConfiguration(dimension_providers=tuple(self._providers), **self._options)

    def build(self) -> CloudWatchReporter:
        """
        Build the reporter. Its configuration cannot change afterwards.

        Raises:
            ValidationError: If an option is invalid.
        """
        return CloudWatchReporter(
            self.build_config(),
            self.client,
            registry=self._registry,
            runtime_metrics=self._runtime_metrics,
            sanitizer=self._sanitizer,
        )

    def enable(self) -> Optional[CloudWatchReporter]:
        """
        Build the reporter and start reporting every configured period.

        Never raises: failures are logged and None is returned, so enabling
        metrics cannot take the application down.
        """
        try:
            reporter = self.build()
            reporter.start()
            return reporter
        except Exception as e:
            logger.error(f"Unable to enable CloudWatch reporter: {e}", exc_info=True)
            return None
