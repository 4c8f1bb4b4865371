"""
Telemetry Module

Spans, metrics aggregation and snapshots for the Ryzanstein runtime.
"""

from .core import SpanGuard, TelemetryCore, TelemetrySnapshot
from .metric_names import MetricNames
from .metrics_collector import HistogramStats, MetricsCollector
from .prometheus import render_prometheus
from .spans import OperationKind, SpanOperation, SpanRecord, SpanStatus, StatusKind

__all__ = [
    "TelemetryCore",
    "SpanGuard",
    "TelemetrySnapshot",
    "MetricsCollector",
    "HistogramStats",
    "MetricNames",
    "SpanOperation",
    "OperationKind",
    "SpanStatus",
    "StatusKind",
    "SpanRecord",
    "render_prometheus",
]
