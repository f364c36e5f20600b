"""
Runtime statistics of the reporting process (memory, threads, gc).
"""

from .runtime_metrics import GarbageCollectorStats, RuntimeMetrics, RuntimeStats, ThreadState

__all__ = ["GarbageCollectorStats", "RuntimeMetrics", "RuntimeStats", "ThreadState"]
