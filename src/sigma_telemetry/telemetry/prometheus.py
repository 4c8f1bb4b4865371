"""
Prometheus Exposition

Custom prometheus_client collector that renders the MetricsCollector
state in the Prometheus text format.
"""

import logging
import re
from typing import Callable, Iterator, Tuple

from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_client.core import (
    CounterMetricFamily,
    GaugeMetricFamily,
    Metric,
    SummaryMetricFamily,
)
from prometheus_client.registry import CollectorRegistry

from .metric_names import MetricNames
from .metrics_collector import MetricsCollector, process_memory_mb


logger = logging.getLogger(__name__)

_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_:]")


def prometheus_name(name: str) -> str:
    """Map a dotted metric name to a valid Prometheus metric name."""
    sanitized = _INVALID_CHARS.sub("_", name)
    if not sanitized or sanitized[:1].isdigit():
        sanitized = f"_{sanitized}"
    return sanitized


class AggregatorCollector:
    """
    Exposes counters, gauges and histogram summaries on scrape.

    Process memory is read at scrape time and exposed without being
    stored in the aggregator, unless a gauge of that name was set.
    """

    def __init__(self, metrics: MetricsCollector):
        self._metrics = metrics

    def collect(self) -> Iterator[Metric]:
        for name, value in sorted(self._metrics.counters().items()):
            family = _build(name, lambda n: CounterMetricFamily(n, f"Counter {name}", value=value))
            if family is not None:
                yield family

        gauges = self._metrics.gauges()
        if MetricNames.MEMORY_USAGE_MB not in gauges:
            rss_mb = process_memory_mb()
            if rss_mb is not None:
                gauges[MetricNames.MEMORY_USAGE_MB] = rss_mb

        for name, value in sorted(gauges.items()):
            family = _build(name, lambda n: GaugeMetricFamily(n, f"Gauge {name}", value=value))
            if family is not None:
                yield family

        for name in sorted(self._metrics.histogram_names()):
            stats = self._metrics.get_histogram_stats(name)
            if stats is None:
                continue
            family = _build(
                name,
                lambda n: SummaryMetricFamily(
                    n, f"Histogram {name}", count_value=stats.count, sum_value=stats.sum
                ),
            )
            if family is not None:
                yield family


def _build(name: str, factory: Callable[[str], Metric]):
    # Some names stay invalid after sanitizing, e.g. "_total" on a counter
    try:
        return factory(prometheus_name(name))
    except ValueError as e:
        logger.warning(f"Skipping metric '{name}' in Prometheus output: {e}")
        return None


def render_prometheus(metrics: MetricsCollector) -> Tuple[bytes, str]:
    """
    Generate Prometheus metrics response.

    Returns:
        Tuple of (metrics_text, content_type)
    """
    registry = CollectorRegistry(auto_describe=False)
    registry.register(AggregatorCollector(metrics))
    return generate_latest(registry), CONTENT_TYPE_LATEST
