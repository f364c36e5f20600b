"""
Unit tests for ReporterBuilder.
"""

import logging
from unittest.mock import patch

import pytest

from cwreporter.config.builder import ReporterBuilder
from cwreporter.dimensions import InstanceIdProvider, StaticDimensionProvider
from cwreporter.models import Dimension, MeterData, MetricSample, Snapshot, TimeUnit
from cwreporter.reporting import CloudWatchReporter
from cwreporter.validation import ValidationError

MINUTE_NS = 60 * 1_000_000_000


@pytest.mark.unit
class TestReporterBuilder:
    """Test cases for building reporters."""

    def test_every_option(self, recording_client):
        builder = (
            ReporterBuilder("svc", recording_client)
            .with_percentiles(0.5, 0.9)
            .with_one_minute_rate(False)
            .with_five_minute_rate()
            .with_fifteen_minute_rate()
            .with_meter_summary()
            .with_timer_summary()
            .with_histogram_summary()
            .with_jvm_memory(False)
            .with_jvm_thread_state()
            .with_jvm_gc()
            .with_duration_unit("seconds")
            .with_rate_unit(TimeUnit.MINUTES)
            .with_cloudwatch_enabled(False)
            .with_delay(15)
        )
        config = builder.build_config()

        assert config.percentiles == (0.5, 0.9)
        assert config.send_one_minute_rate is False
        assert config.send_five_minute_rate is True
        assert config.send_fifteen_minute_rate is True
        assert config.send_meter_summary is True
        assert config.send_timer_lifetime_summary is True
        assert config.send_histogram_lifetime_summary is True
        assert config.send_jvm_memory is False
        assert config.send_jvm_thread_state is True
        assert config.send_jvm_gc is True
        assert config.duration_unit is TimeUnit.SECONDS
        assert config.rate_unit is TimeUnit.MINUTES
        assert config.send_to_cloudwatch is False
        assert config.period_seconds == 15

    def test_no_percentiles(self, recording_client):
        config = ReporterBuilder("svc", recording_client).with_percentiles().build_config()
        assert config.percentiles == ()

    def test_dimension_providers_in_order(self, recording_client):
        config = (
            ReporterBuilder("svc", recording_client)
            .with_instance_id_dimension("flask")
            .with_dimensions({"Env": "prod"})
            .with_ec2_instance_id_dimension(retry_interval=5.0)
            .build_config()
        )

        fixed, static, ec2 = config.dimension_providers
        assert fixed.runtime_dimensions() == [Dimension("InstanceId", "flask")]
        assert isinstance(static, StaticDimensionProvider)
        assert isinstance(ec2, InstanceIdProvider)
        assert ec2.retry_interval == 5.0

    def test_invalid_option_raises_on_build(self, recording_client):
        builder = ReporterBuilder("", recording_client)
        with pytest.raises(ValidationError):
            builder.build()

    def test_build_timer_example(self, recording_client, registry):
        """Test the minutes timer end to end through a built reporter."""
        registry.register(MetricSample.timer(
            "job",
            MeterData(count=5000, five_minute_rate=0.5),
            Snapshot.of(i * MINUTE_NS for i in range(100) for _ in range(50)),
        ))
        reporter = (
            ReporterBuilder("svc", recording_client)
            .with_registry(registry)
            .with_percentiles(0.1, 0.5, 0.9, 0.999)
            .with_one_minute_rate(False)
            .with_five_minute_rate()
            .with_timer_summary()
            .with_duration_unit(TimeUnit.SECONDS)
            .with_jvm_memory(False)
            .build()
        )

        reporter.report()

        assert len(recording_client.points) == 9
        assert recording_client.point("job.min").value == 0.0
        assert recording_client.point("job_percentile_0.999").value == 5940.0

    def test_clamp_bounds(self, recording_client):
        reporter = (
            ReporterBuilder("svc", recording_client)
            .with_clamp_bounds(1.0, 100.0)
            .with_jvm_memory(False)
            .build()
        )
        reporter.report_samples(gauges={"g": MetricSample.gauge("g", 1000)})
        assert recording_client.point("g").value == 100.0

    def test_runtime_metrics_shared(self, recording_client, fake_runtime_metrics):
        reporter = ReporterBuilder("svc", recording_client).with_runtime_metrics(fake_runtime_metrics).build()
        assert reporter.runtime_metrics is fake_runtime_metrics

    def test_with_filter(self, recording_client):
        reporter = (
            ReporterBuilder("svc", recording_client)
            .with_filter(lambda name, sample: name != "hidden")
            .with_jvm_memory(False)
            .build()
        )
        reporter.report_samples(counters={
            "hidden": MetricSample.counter("hidden", 1),
            "shown": MetricSample.counter("shown", 1),
        })
        assert recording_client.names() == ["shown"]


@pytest.mark.unit
class TestEnable:
    """Test cases for build-and-start."""

    def test_enable_starts_reporter(self, builder):
        reporter = builder.with_delay(60).enable()
        try:
            assert isinstance(reporter, CloudWatchReporter)
            assert reporter.running
        finally:
            reporter.stop()

    def test_enable_logs_instead_of_raising(self, recording_client, caplog):
        with caplog.at_level(logging.ERROR):
            assert ReporterBuilder("", recording_client).enable() is None
        assert "Unable to enable" in caplog.text

    @patch.object(CloudWatchReporter, "start", side_effect=RuntimeError("no threads"))
    def test_enable_start_failure(self, _start, builder):
        assert builder.enable() is None


@pytest.mark.unit
class TestFromToml:
    """Test cases for builders loaded from TOML."""

    def test_from_toml(self, config_file, recording_client):
        builder = ReporterBuilder.from_toml(config_file, recording_client)
        config = builder.with_jvm_gc().build_config()

        assert config.namespace == "test-service"
        assert config.send_five_minute_rate is True
        assert config.send_jvm_gc is True
        assert config.period_seconds == 30.0
        assert len(config.dimension_providers) == 2

    def test_from_toml_invalid(self, temp_dir, recording_client):
        path = temp_dir / "reporter.toml"
        path.write_text('[reporter]\nnamespace = "svc"\nduration_unit = "days"\n')
        with pytest.raises(ValidationError):
            ReporterBuilder.from_toml(path, recording_client)
