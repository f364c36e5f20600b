"""
Process-runtime statistics for the current Python interpreter.

This module provides:
- RuntimeStats: One snapshot of memory, thread and garbage collector figures.
- RuntimeMetrics: Reads those figures with psutil, threading and gc, and
  times collections through a gc callback installed at construction.

RuntimeMetrics is an explicitly constructed dependency. A reporter creates
one unless it is given one, and `close()` uninstalls the gc callback.
"""

import gc
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

import psutil

from ..models import TimeUnit

logger = logging.getLogger(__name__)


class ThreadState(Enum):
    """How a live thread of this process is classified."""

    MAIN = "main"
    WORKER = "worker"
    DAEMON = "daemon"
    DUMMY = "dummy"  # started outside the threading module
    NATIVE = "native"  # OS threads invisible to the threading module


@dataclass(frozen=True)
class GarbageCollectorStats:
    """Cumulative collections of one gc generation and the time spent in them."""

    time_ms: int
    runs: int

    def get_time(self, unit: TimeUnit) -> int:
        return unit.convert(self.time_ms, TimeUnit.MILLISECONDS)


@dataclass(frozen=True)
class RuntimeStats:
    """
    Runtime figures of the process at one instant.

    Attributes:
        heap_usage: Resident memory as a fraction of physical memory.
        non_heap_usage: Shared resident memory as a fraction of resident memory.
        thread_count: Live threads known to the threading module.
        daemon_thread_count: Live daemon threads.
        thread_states: Thread count per ThreadState.
        garbage_collectors: Stats keyed by collector name (``gen0`` ...).
    """

    heap_usage: float
    non_heap_usage: float
    thread_count: int
    daemon_thread_count: int
    thread_states: Dict[ThreadState, int] = field(default_factory=dict)
    garbage_collectors: Dict[str, GarbageCollectorStats] = field(default_factory=dict)


class RuntimeMetrics:
    """
    Reads runtime statistics of this process.

    Memory figures come from psutil. Python has no heap/non-heap split, so
    the heap figure is resident set size over total physical memory and the
    non-heap figure is the shared part of the resident set (0.0 where the
    platform does not report shared memory).
    """

    def __init__(self, process: Optional[psutil.Process] = None, track_gc_time: bool = True):
        """
        Args:
            process: Process to inspect; defaults to the current one.
            track_gc_time: Install a gc callback that measures collection time.
        """
        self._process = process or psutil.Process()
        self._gc_lock = threading.Lock()
        self._gc_time_ns: Dict[int, int] = {}
        self._gc_started_ns: Optional[int] = None
        self._callback_installed = False

        if track_gc_time:
            gc.callbacks.append(self._on_gc)
            self._callback_installed = True
            logger.debug("Installed gc timing callback")

    def close(self) -> None:
        """Uninstall the gc callback. Safe to call more than once."""
        if self._callback_installed:
            try:
                gc.callbacks.remove(self._on_gc)
            except ValueError:
                pass
            self._callback_installed = False
            logger.debug("Removed gc timing callback")

    def _on_gc(self, phase: str, info: Dict[str, int]) -> None:
        if phase == "start":
            self._gc_started_ns = time.perf_counter_ns()
            return
        started = self._gc_started_ns
        self._gc_started_ns = None
        if started is None:
            return
        elapsed = time.perf_counter_ns() - started
        generation = info.get("generation", 0)
        with self._gc_lock:
            self._gc_time_ns[generation] = self._gc_time_ns.get(generation, 0) + elapsed

    def heap_usage(self) -> float:
        total = psutil.virtual_memory().total
        if not total:
            return 0.0
        return self._process.memory_info().rss / total

    def non_heap_usage(self) -> float:
        info = self._process.memory_info()
        shared = getattr(info, "shared", 0)
        if not info.rss:
            return 0.0
        return shared / info.rss

    def thread_count(self) -> int:
        return threading.active_count()

    def daemon_thread_count(self) -> int:
        return sum(1 for t in threading.enumerate() if t.daemon)

    def thread_states(self) -> Dict[ThreadState, int]:
        states = {state: 0 for state in ThreadState}
        threads = threading.enumerate()
        main = threading.main_thread()
        for thread in threads:
            if thread is main:
                states[ThreadState.MAIN] += 1
            # threading has no public marker for threads it did not start
            elif isinstance(thread, threading._DummyThread):
                states[ThreadState.DUMMY] += 1
            elif thread.daemon:
                states[ThreadState.DAEMON] += 1
            else:
                states[ThreadState.WORKER] += 1
        try:
            states[ThreadState.NATIVE] = max(0, self._process.num_threads() - len(threads))
        except psutil.Error as e:
            logger.debug(f"Could not count native threads: {e}")
        return states

    def garbage_collectors(self) -> Dict[str, GarbageCollectorStats]:
        with self._gc_lock:
            times = dict(self._gc_time_ns)
        collectors = {}
        for generation, stats in enumerate(gc.get_stats()):
            collectors[f"gen{generation}"] = GarbageCollectorStats(
                time_ms=times.get(generation, 0) // 1_000_000,
                runs=stats.get("collections", 0),
            )
        return collectors

    def snapshot(self, memory: bool = True, threads: bool = True, gc_stats: bool = True) -> RuntimeStats:
        """
        Read the requested figure groups; skipped groups are left empty.

        Args:
            memory: Read heap and non-heap usage.
            threads: Read thread counts and states.
            gc_stats: Read garbage collector stats.
        """
        return RuntimeStats(
            heap_usage=self.heap_usage() if memory else 0.0,
            non_heap_usage=self.non_heap_usage() if memory else 0.0,
            thread_count=self.thread_count() if threads else 0,
            daemon_thread_count=self.daemon_thread_count() if threads else 0,
            thread_states=self.thread_states() if threads else {},
            garbage_collectors=self.garbage_collectors() if gc_stats else {},
        )
