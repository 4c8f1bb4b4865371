"""
Metrics Collector

Thread-safe in-memory store of named counters, gauges and histograms.
Histogram statistics (count, sum, mean, p50, p99) are recomputed on every read.
"""

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Dict, List, Optional, Tuple

import psutil

from ..errors import MetricError
from .metric_names import MetricNames


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistogramStats:
    """Summary statistics over a histogram's samples."""

    count: int
    sum: float
    mean: float
    p50: float
    p99: float


class MetricsCollector:
    """
    Concurrency-safe aggregator for counters, gauges and histograms.

    Each mapping has its own lock. Operations on one metric name are
    linearizable; composite reads across names are not atomic.
    """

    def __init__(self):
        """Initialize empty metric mappings."""
        self._counters: Dict[str, int] = {}
        self._gauges: Dict[str, float] = {}
        self._histograms: Dict[str, List[float]] = {}

        # Reentrant: a SpanGuard collected by the cyclic GC while one of these
        # is held records itself from __del__ on the same thread
        self._counters_lock = RLock()
        self._gauges_lock = RLock()
        self._histograms_lock = RLock()

    def increment(self, name: str) -> None:
        """Increment a counter by 1."""
        self.increment_by(name, 1)

    def increment_by(self, name: str, amount: int) -> None:
        """
        Increment a counter by a specific amount.

        Args:
            name: Counter name, created at zero if absent
            amount: Non-negative increment

        Raises:
            MetricError: If amount is negative
        """
        if amount < 0:
            raise MetricError(f"counter '{name}' cannot be decremented (amount={amount})")

        with self._counters_lock:
            self._counters[name] = self._counters.get(name, 0) + int(amount)

    def record_histogram(self, name: str, value: float) -> None:
        """Append a sample (e.g. a latency) to a histogram."""
        with self._histograms_lock:
            self._histograms.setdefault(name, []).append(float(value))

    def set_gauge(self, name: str, value: float) -> None:
        """Overwrite a gauge with its latest value."""
        with self._gauges_lock:
            self._gauges[name] = float(value)

    def get_counter(self, name: str) -> int:
        """Get counter value (0 for unknown names)."""
        with self._counters_lock:
            return self._counters.get(name, 0)

    def get_gauge(self, name: str) -> Optional[float]:
        """Get gauge value, or None if the gauge was never set."""
        with self._gauges_lock:
            return self._gauges.get(name)

    def get_histogram_stats(self, name: str) -> Optional[HistogramStats]:
        """
        Compute statistics for a histogram.

        Percentiles use nearest-rank selection on the ascending samples:
        p50 is ``sorted[count // 2]`` and p99 is ``sorted[int(count * 0.99)]``.

        Args:
            name: Histogram name

        Returns:
            HistogramStats, or None if the histogram is unknown or empty
        """
        with self._histograms_lock:
            values = self._histograms.get(name)
            if not values:
                return None
            samples = sorted(values)

        count = len(samples)
        total = sum(samples)
        return HistogramStats(
            count=count,
            sum=total,
            mean=total / count,
            p50=samples[count // 2],
            p99=samples[int(count * 0.99)],
        )

    def counters(self) -> Dict[str, int]:
        """Copy of all counters."""
        with self._counters_lock:
            return dict(self._counters)

    def gauges(self) -> Dict[str, float]:
        """Copy of all gauges."""
        with self._gauges_lock:
            return dict(self._gauges)

    def histogram_names(self) -> List[str]:
        """Names of all registered histograms."""
        with self._histograms_lock:
            return list(self._histograms)

    def registered_counts(self) -> Tuple[int, int, int]:
        """
        Number of distinct counters, gauges and histograms.

        Each mapping is read under its own lock, so the three sizes may
        reflect slightly different moments.
        """
        with self._counters_lock:
            counter_count = len(self._counters)
        with self._gauges_lock:
            gauge_count = len(self._gauges)
        with self._histograms_lock:
            histogram_count = len(self._histograms)
        return counter_count, gauge_count, histogram_count

    def update_system_metrics(self) -> None:
        """Update system-level gauges (process memory)."""
        rss_mb = process_memory_mb()
        if rss_mb is not None:
            self.set_gauge(MetricNames.MEMORY_USAGE_MB, rss_mb)


def process_memory_mb() -> Optional[float]:
    """Current process RSS in MB, or None if psutil cannot read it."""
    try:
        return psutil.Process().memory_info().rss / (1024 * 1024)
    except psutil.Error as e:
        logger.warning(f"Failed to read process memory: {e}")
        return None
