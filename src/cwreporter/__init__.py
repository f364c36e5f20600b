"""
cwreporter: report application metrics to Amazon CloudWatch.

Reads gauges, counters, histograms, meters and timers from a metrics registry,
together with runtime statistics of the process, and sends them to the
CloudWatch PutMetricData API in batches of at most 20 data points.

The package is organized into specialized modules:
- models: Data points, metric samples, snapshots and time units
- config: Reporter options, TOML loading and the fluent builder
- validation: Input validation and error handling
- dimensions: Dimension providers (static values, EC2 instance id)
- runtime: Memory, thread and gc statistics of the process
- reporting: Sanitizer, translator, batching and the reporter itself
- adapters: In-memory registry and the boto3 CloudWatch client
- cli: Command-line interface

Usage:
    From command line:
        cwreporter --config reporter.toml [--dry-run] [--once]

    Programmatically:
        from cwreporter import CloudWatchIngestionClient, InMemoryRegistry, ReporterBuilder
        registry = InMemoryRegistry()
        reporter = (
            ReporterBuilder("my-service", CloudWatchIngestionClient())
            .with_registry(registry)
            .with_ec2_instance_id_dimension()
            .build()
        )
        reporter.start()
"""

# Configuration
from .config import ReportConfiguration, load_toml_file, validate_reporter_config

# Reporting
from .reporting import (
    CloudWatchReporter,
    DataPointTranslator,
    MetricBatch,
    ValueSanitizer,
)
from .config.builder import ReporterBuilder

# Model classes for external use
from .models import (
    DataPoint,
    Dimension,
    MeterData,
    MetricKind,
    MetricSample,
    Snapshot,
    StandardUnit,
    TimeUnit,
)

# Collaborators
from .adapters import CloudWatchIngestionClient, InMemoryRegistry, IngestionClient, MetricsRegistry
from .dimensions import DimensionProvider, InstanceIdProvider, StaticDimensionProvider
from .runtime import RuntimeMetrics

# Validation utilities
from .validation import BatchSubmissionError, ReporterError, ValidationError

from .cli import main_cli

__version__ = "2.0.0"

__all__ = [
    # Configuration
    "ReportConfiguration",
    "ReporterBuilder",
    "load_toml_file",
    "validate_reporter_config",
    # Reporting
    "CloudWatchReporter",
    "DataPointTranslator",
    "MetricBatch",
    "ValueSanitizer",
    # Models
    "DataPoint",
    "Dimension",
    "MeterData",
    "MetricKind",
    "MetricSample",
    "Snapshot",
    "StandardUnit",
    "TimeUnit",
    # Collaborators
    "CloudWatchIngestionClient",
    "InMemoryRegistry",
    "IngestionClient",
    "MetricsRegistry",
    "DimensionProvider",
    "InstanceIdProvider",
    "StaticDimensionProvider",
    "RuntimeMetrics",
    # Errors
    "BatchSubmissionError",
    "ReporterError",
    "ValidationError",
    "main_cli",
]
