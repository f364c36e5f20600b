"""
Unit tests for InstanceIdProvider.

The metadata endpoint is stubbed with httpx.MockTransport and time is driven
by a fake clock, so retry windows can be crossed without sleeping.
"""

import logging

import httpx
import pytest

from cwreporter.dimensions import (
    DIMENSION_NAME,
    UNKNOWN_INSTANCE_ID,
    InstanceIdProvider,
)
from cwreporter.models import Dimension, MetricSample


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class MetadataService:
    """Scripted metadata endpoint; each request pops the next response."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def make_provider(service, clock=None, **kwargs):
    client = httpx.Client(transport=httpx.MockTransport(service))
    return InstanceIdProvider(http_client=client, clock=clock or FakeClock(), **kwargs)


def instance_dim(value):
    return [Dimension(DIMENSION_NAME, value)]


SAMPLE = MetricSample.counter("c", 1)


@pytest.mark.unit
class TestFixedInstanceId:
    """Test cases for an explicitly supplied id."""

    def test_fixed_id_never_fetches(self):
        service = MetadataService(httpx.Response(200, text="i-remote"))
        provider = make_provider(service, instance_id="flask")

        assert provider.dimensions_for("c", SAMPLE) == instance_dim("flask")
        assert provider.runtime_dimensions() == instance_dim("flask")
        assert provider.resolved
        assert service.requests == []

    def test_filter_excludes_metric(self):
        provider = InstanceIdProvider(lambda name, sample: name != "c", instance_id="flask")
        assert provider.dimensions_for("c", SAMPLE) == []
        assert provider.dimensions_for("d", SAMPLE) == instance_dim("flask")
        # runtime points ignore the filter
        assert provider.runtime_dimensions() == instance_dim("flask")

    @pytest.mark.parametrize("instance_id", ["", "   "])
    def test_blank_fixed_id_rejected(self, instance_id):
        with pytest.raises(ValueError):
            InstanceIdProvider(instance_id=instance_id)


@pytest.mark.unit
class TestMetadataLookup:
    """Test cases for the lazy lookup and retry state machine."""

    def test_successful_lookup_is_permanent(self):
        service = MetadataService(httpx.Response(200, text="i-0abc\n"))
        provider = make_provider(service)

        assert provider.instance_id is None
        assert provider.dimensions_for("c", SAMPLE) == instance_dim("i-0abc")
        assert provider.dimensions_for("c", SAMPLE) == instance_dim("i-0abc")
        assert provider.instance_id == "i-0abc"
        assert len(service.requests) == 1
        assert str(service.requests[0].url) == "http://169.254.169.254/latest/meta-data/instance-id"

    @pytest.mark.parametrize(
        "failure",
        [
            httpx.Response(404),
            httpx.Response(500, text="error"),
            httpx.Response(200, text="   "),
            httpx.ConnectError("no route to host"),
            httpx.ReadTimeout("timed out"),
        ],
    )
    def test_failure_reports_unknown(self, failure):
        provider = make_provider(MetadataService(failure))

        assert provider.runtime_dimensions() == instance_dim(UNKNOWN_INSTANCE_ID)
        assert not provider.resolved

    def test_no_retry_within_interval(self):
        clock = FakeClock()
        service = MetadataService(httpx.Response(503))
        provider = make_provider(service, clock)

        provider.runtime_dimensions()
        clock.now += 30
        provider.runtime_dimensions()
        clock.now += 30  # exactly 60s since the last attempt
        provider.runtime_dimensions()

        assert len(service.requests) == 1

    def test_retry_after_interval_then_recover(self, caplog):
        """Test warn-once on failure and a single recovery notice."""
        clock = FakeClock()
        service = MetadataService(
            httpx.Response(503),
            httpx.Response(503),
            httpx.Response(200, text="i-later"),
        )
        provider = make_provider(service, clock)

        with caplog.at_level(logging.WARNING, logger="cwreporter.dimensions.instance_id"):
            assert provider.runtime_dimensions() == instance_dim(UNKNOWN_INSTANCE_ID)
            clock.now += 61
            assert provider.runtime_dimensions() == instance_dim(UNKNOWN_INSTANCE_ID)
            clock.now += 61
            assert provider.runtime_dimensions() == instance_dim("i-later")
            clock.now += 600
            assert provider.runtime_dimensions() == instance_dim("i-later")

        assert len(service.requests) == 3
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2
        assert "503" in warnings[0] and "instance_id" in warnings[0]
        assert "after failure" in warnings[1]

    def test_first_success_logged_at_info(self, caplog):
        provider = make_provider(MetadataService(httpx.Response(200, text="i-1")))

        with caplog.at_level(logging.INFO, logger="cwreporter.dimensions.instance_id"):
            provider.runtime_dimensions()

        records = [r for r in caplog.records if r.name == "cwreporter.dimensions.instance_id"]
        assert [r.levelno for r in records] == [logging.INFO]

    def test_lookup_in_progress_is_not_duplicated(self):
        """Test that a caller does not wait on a lookup another thread holds."""
        service = MetadataService(httpx.Response(200, text="i-1"))
        provider = make_provider(service)

        provider._lock.acquire()
        try:
            assert provider.runtime_dimensions() == instance_dim(UNKNOWN_INSTANCE_ID)
        finally:
            provider._lock.release()

        assert service.requests == []
        assert provider.runtime_dimensions() == instance_dim("i-1")

    def test_custom_url_and_timeout(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["timeout"] = request.extensions.get("timeout")
            return httpx.Response(200, text="i-9")

        provider = make_provider(handler, url="http://metadata.local/id", timeout=0.5)

        assert provider.runtime_dimensions() == instance_dim("i-9")
        assert seen["url"] == "http://metadata.local/id"
        assert seen["timeout"]["read"] == 0.5
