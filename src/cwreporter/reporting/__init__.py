"""
Report cycle: sanitizing, translating, batching and submitting data points.
"""

from .batch import MAX_BATCH_SIZE, MetricBatch
from .once import OnceFlags
from .reporter import CloudWatchReporter
from .sanitizer import LARGEST_SENDABLE, SMALLEST_SENDABLE, ValueSanitizer
from .translator import DataPointTranslator

__all__ = [
    "MAX_BATCH_SIZE",
    "MetricBatch",
    "OnceFlags",
    "CloudWatchReporter",
    "LARGEST_SENDABLE",
    "SMALLEST_SENDABLE",
    "ValueSanitizer",
    "DataPointTranslator",
]
