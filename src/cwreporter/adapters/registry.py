"""
Minimal in-memory metrics registry.

Recording raw measurements is the application's concern; this registry only
holds samples the application has already built, or callables that build a
sample on demand at the start of each report cycle.
"""

import logging
import threading
from typing import Callable, Dict, Mapping, Union

from ..models import MetricKind, MetricSample

logger = logging.getLogger(__name__)

SampleSupplier = Callable[[], MetricSample]


class InMemoryRegistry:
    """
    Thread-safe MetricsRegistry holding samples keyed by name.

    Example:
        registry = InMemoryRegistry()
        registry.register(MetricSample.counter("requests", 0))
        registry.register_supplier("queue.depth", MetricKind.GAUGE,
                                   lambda: MetricSample.gauge("queue.depth", q.qsize()))
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[str, Union[MetricSample, "_Supplier"]] = {}

    def register(self, sample: MetricSample) -> None:
        """Add a sample, replacing any metric already registered under its name."""
        with self._lock:
            self._entries[sample.name] = sample

    def register_supplier(self, name: str, kind: MetricKind, supplier: SampleSupplier) -> None:
        """
        Add a metric whose sample is built by `supplier` at snapshot time.

        Args:
            name: Metric name.
            kind: Family the metric is reported under.
            supplier: Returns the current sample; it must have `kind`.
        """
        with self._lock:
            self._entries[name] = _Supplier(name, kind, supplier)

    def remove(self, name: str) -> bool:
        """Remove a metric. Returns False if nothing was registered under `name`."""
        with self._lock:
            return self._entries.pop(name, None) is not None

    def gauges(self) -> Mapping[str, MetricSample]:
        return self._family(MetricKind.GAUGE)

    def counters(self) -> Mapping[str, MetricSample]:
        return self._family(MetricKind.COUNTER)

    def histograms(self) -> Mapping[str, MetricSample]:
        return self._family(MetricKind.HISTOGRAM)

    def meters(self) -> Mapping[str, MetricSample]:
        return self._family(MetricKind.METER)

    def timers(self) -> Mapping[str, MetricSample]:
        return self._family(MetricKind.TIMER)

    def _family(self, kind: MetricKind) -> Dict[str, MetricSample]:
        with self._lock:
            entries = [(name, entry) for name, entry in self._entries.items() if entry.kind is kind]

        family: Dict[str, MetricSample] = {}
        for name, entry in sorted(entries, key=lambda item: item[0]):
            if isinstance(entry, _Supplier):
                sample = entry.get()
                if sample is None:
                    continue
            else:
                sample = entry
            family[name] = sample
        return family

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class _Supplier:
    def __init__(self, name: str, kind: MetricKind, supplier: SampleSupplier):
        self.name = name
        self.kind = kind
        self.supplier = supplier

    def get(self):
        try:
            sample = self.supplier()
        except Exception as e:
            logger.warning(f"Supplier for metric {self.name} failed, skipping it: {e}")
            return None
        if not isinstance(sample, MetricSample):
            logger.warning(
                f"Supplier for metric {self.name} returned {type(sample).__name__}, "
                f"expected a MetricSample; skipping it"
            )
            return None
        if sample.kind is not self.kind:
            logger.warning(
                f"Supplier for metric {self.name} returned a {sample.kind.value} "
                f"sample, expected {self.kind.value}; skipping it"
            )
            return None
        return sample
