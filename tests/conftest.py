"""
Pytest configuration and shared fixtures for the cwreporter test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the cwreporter project.
"""

import shutil
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Sequence, Tuple
from unittest.mock import Mock

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cwreporter.adapters import InMemoryRegistry  # noqa: E402
from cwreporter.config.builder import ReporterBuilder  # noqa: E402
from cwreporter.models import DataPoint  # noqa: E402
from cwreporter.runtime import GarbageCollectorStats, RuntimeMetrics, RuntimeStats, ThreadState  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Test Doubles
# ============================================================================


class RecordingClient:
    """Ingestion client that records every batch instead of sending it."""

    def __init__(self, fail_with: Exception = None):
        self.calls: List[Tuple[str, List[DataPoint]]] = []
        self.fail_with = fail_with

    def put_metric_data(self, namespace: str, points: Sequence[DataPoint]) -> None:
        self.calls.append((namespace, list(points)))
        if self.fail_with is not None:
            raise self.fail_with

    @property
    def points(self) -> List[DataPoint]:
        return [point for _, batch in self.calls for point in batch]

    def names(self) -> List[str]:
        return [point.name for point in self.points]

    def point(self, name: str) -> DataPoint:
        matches = [point for point in self.points if point.name == name]
        assert len(matches) == 1, f"expected one point named {name}, got {len(matches)}"
        return matches[0]


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def recording_client():
    """Ingestion client that records submitted batches."""
    return RecordingClient()


@pytest.fixture
def registry():
    """Empty in-memory metrics registry."""
    return InMemoryRegistry()


@pytest.fixture
def timestamp():
    """Fixed cycle timestamp."""
    return datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def builder(recording_client):
    """Builder sending to the recording client, with runtime statistics disabled."""
    return ReporterBuilder("svc", recording_client).with_jvm_memory(False)


@pytest.fixture
def runtime_stats():
    """Runtime statistics with known values."""
    return RuntimeStats(
        heap_usage=0.25,
        non_heap_usage=0.1,
        thread_count=4,
        daemon_thread_count=1,
        thread_states={
            ThreadState.MAIN: 1,
            ThreadState.WORKER: 2,
            ThreadState.DAEMON: 1,
            ThreadState.DUMMY: 0,
            ThreadState.NATIVE: 3,
        },
        garbage_collectors={
            "gen0": GarbageCollectorStats(time_ms=1500, runs=40),
            "gen1": GarbageCollectorStats(time_ms=20, runs=3),
        },
    )


@pytest.fixture
def fake_runtime_metrics(runtime_stats):
    """RuntimeMetrics stand-in whose snapshot() returns runtime_stats."""
    runtime = Mock(spec=RuntimeMetrics)
    runtime.snapshot.return_value = runtime_stats
    return runtime


# ============================================================================
# Configuration Fixtures
# ============================================================================


SAMPLE_TOML = """\
[reporter]
namespace = "test-service"
percentiles = [0.5, 0.99]
send_five_minute_rate = true
send_jvm_memory = true
duration_unit = "seconds"
period_seconds = 30
instance_id = "web-1"

[reporter.dimensions]
Environment = "staging"
"""


@pytest.fixture
def config_file(temp_dir):
    """Write a reporter configuration file and return its path."""
    path = temp_dir / "reporter.toml"
    path.write_text(SAMPLE_TOML)
    return path
