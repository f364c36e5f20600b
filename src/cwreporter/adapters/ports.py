"""
Port interfaces for the reporter's external collaborators.

The reporter depends only on these protocols: a registry that hands out the
five metric families, and an ingestion client that accepts one batch at a time.
"""

from typing import Mapping, Protocol, Sequence, runtime_checkable

from ..models import DataPoint, MetricSample


@runtime_checkable
class MetricsRegistry(Protocol):
    """
    Source of metric samples, queried once at the start of every cycle.

    Each method returns a mapping from metric name to sample. The reporter
    iterates names in ascending order regardless of mapping order.
    """

    def gauges(self) -> Mapping[str, MetricSample]:
        ...

    def counters(self) -> Mapping[str, MetricSample]:
        ...

    def histograms(self) -> Mapping[str, MetricSample]:
        ...

    def meters(self) -> Mapping[str, MetricSample]:
        ...

    def timers(self) -> Mapping[str, MetricSample]:
        ...


@runtime_checkable
class IngestionClient(Protocol):
    """Accepts one namespace-qualified batch of at most 20 data points."""

    def put_metric_data(self, namespace: str, points: Sequence[DataPoint]) -> None:
        """
        Submit a batch synchronously.

        Raises:
            Exception: Any transport or quota failure; no retry is attempted.
        """
        ...
