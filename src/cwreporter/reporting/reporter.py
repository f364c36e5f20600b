"""
Report orchestrator.

A CloudWatchReporter runs report cycles: it reads the metric families from a
registry, translates every metric into data points and pushes them through a
MetricBatch to the ingestion client. Cycles can be triggered directly with
report(), or periodically from a daemon thread with start()/stop().
"""

import logging
import threading
from datetime import datetime, timezone
from typing import List, Mapping, Optional

from ..adapters.ports import IngestionClient, MetricsRegistry
from ..config.reporter_config import ReportConfiguration
from ..models import Dimension, MetricSample
from ..runtime import RuntimeMetrics
from ..validation import BatchSubmissionError
from .batch import MetricBatch
from .sanitizer import ValueSanitizer
from .translator import DataPointTranslator

logger = logging.getLogger(__name__)

EMPTY: Mapping[str, MetricSample] = {}


class CloudWatchReporter:
    """
    Reports metrics and process-runtime statistics to CloudWatch.

    The configuration is frozen once the reporter is built. Report cycles are
    serialized by an internal lock, so it is safe to call report() from
    several threads; a cycle never raises.

    Runtime statistics are read from `runtime_metrics`. If none is given and
    any runtime category is enabled, the reporter creates its own and closes
    it in close().
    """

    def __init__(
        self,
        config: ReportConfiguration,
        client: IngestionClient,
        registry: Optional[MetricsRegistry] = None,
        runtime_metrics: Optional[RuntimeMetrics] = None,
        sanitizer: Optional[ValueSanitizer] = None,
    ):
        self.config = config
        self.client = client
        self.registry = registry
        self.translator = DataPointTranslator(config, sanitizer)

        self._owns_runtime_metrics = False
        if runtime_metrics is None and self._runtime_enabled():
            runtime_metrics = RuntimeMetrics(track_gc_time=config.send_jvm_gc)
            self._owns_runtime_metrics = True
        self.runtime_metrics = runtime_metrics

        self._cycle_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self.stop_event = threading.Event()
        self.thread: Optional[threading.Thread] = None
        self.running = False

        self.cycles_completed = 0
        self.cycles_failed = 0

        logger.debug(f"CloudWatchReporter initialized for namespace '{config.namespace}'")

    def _runtime_enabled(self) -> bool:
        config = self.config
        return config.send_jvm_memory or config.send_jvm_thread_state or config.send_jvm_gc

    def report(self) -> None:
        """Run one report cycle over the registry's current metrics."""
        if self.registry is None:
            self.report_samples()
            return
        try:
            families = (
                self.registry.gauges(),
                self.registry.counters(),
                self.registry.histograms(),
                self.registry.meters(),
                self.registry.timers(),
            )
        except Exception as e:
            self.cycles_failed += 1
            self._log_cycle_failure(e)
            return
        self.report_samples(*families)

    def report_samples(
        self,
        gauges: Mapping[str, MetricSample] = EMPTY,
        counters: Mapping[str, MetricSample] = EMPTY,
        histograms: Mapping[str, MetricSample] = EMPTY,
        meters: Mapping[str, MetricSample] = EMPTY,
        timers: Mapping[str, MetricSample] = EMPTY,
    ) -> None:
        """
        Run one report cycle over explicitly supplied metric families.

        Each family maps metric name to sample; names are reported in
        ascending order. Errors are logged and suppressed.
        """
        with self._cycle_lock:
            batch = MetricBatch(self.config.namespace, self.client, enabled=self.config.send_to_cloudwatch)
            try:
                self._run_cycle(batch, (gauges, counters, histograms, meters, timers))
                self.cycles_completed += 1
            except Exception as e:
                self.cycles_failed += 1
                self._log_cycle_failure(e)

    def _run_cycle(self, batch: MetricBatch, families) -> None:
        timestamp = datetime.now(timezone.utc)

        if self.runtime_metrics is not None and self._runtime_enabled():
            dimensions: List[Dimension] = []
            for provider in self.config.dimension_providers:
                dimensions.extend(provider.runtime_dimensions())
            stats = self.runtime_metrics.snapshot(
                memory=self.config.send_jvm_memory,
                threads=self.config.send_jvm_thread_state,
                gc_stats=self.config.send_jvm_gc,
            )
            batch.extend(self.translator.translate_runtime(stats, dimensions, timestamp))

        for family in families:
            for name in sorted(family):
                sample = family[name]
                if not self.config.metric_filter(name, sample):
                    continue
                try:
                    dimensions = []
                    for provider in self.config.dimension_providers:
                        dimensions.extend(provider.dimensions_for(name, sample))
                    points = self.translator.translate(sample, dimensions, timestamp)
                except Exception as e:
                    logger.warning(f"Error translating metric {name}, skipping it this cycle: {e}")
                    continue
                batch.extend(points)

        batch.flush()

    def _log_cycle_failure(self, error: Exception) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Error reporting metrics to CloudWatch: {error}", exc_info=True)
        elif isinstance(error, BatchSubmissionError):
            logger.warning(f"Error reporting metrics to CloudWatch: {error}: {error.__cause__}")
        else:
            logger.warning(f"Error reporting metrics to CloudWatch: {error}")

    def start(self, period_seconds: Optional[float] = None) -> None:
        """
        Report every `period_seconds` on a daemon thread.

        Args:
            period_seconds: Delay between cycles; defaults to the configured period.
        """
        period = self.config.period_seconds if period_seconds is None else period_seconds
        if period <= 0:
            raise ValueError(f"period_seconds must be positive, got {period}")

        with self._state_lock:
            if self.running:
                logger.warning("CloudWatchReporter already running")
                return

            self.running = True
            self.stop_event.clear()
            self.thread = threading.Thread(
                target=self._reporting_loop,
                args=(period,),
                name=f"CloudWatchReporter-{self.config.namespace}",
                daemon=True,
            )
            self.thread.start()
        logger.info(f"CloudWatchReporter started, reporting every {period:g}s")

    def stop(self, timeout: float = 5.0) -> None:
        """
        Stop the periodic thread.

        Args:
            timeout: Seconds to wait for an in-flight cycle to finish.
        """
        with self._state_lock:
            if not self.running:
                return
            self.running = False
            self.stop_event.set()
            thread = self.thread

        logger.info("Stopping CloudWatchReporter...")
        if thread and thread.is_alive():
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("CloudWatchReporter did not stop within timeout")
            else:
                logger.info("CloudWatchReporter stopped successfully")

    def _reporting_loop(self, period: float) -> None:
        while not self.stop_event.wait(period):
            self.report()

    def close(self, timeout: float = 5.0) -> None:
        """Stop reporting and release the runtime-metric hooks this reporter owns."""
        self.stop(timeout)
        if self._owns_runtime_metrics and self.runtime_metrics is not None:
            self.runtime_metrics.close()

    def __enter__(self) -> "CloudWatchReporter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
