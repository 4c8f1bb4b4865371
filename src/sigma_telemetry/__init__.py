"""
Sigma Telemetry

In-process spans, metrics and OTLP export for the Ryzanstein LLM
inference runtime.
"""

__version__ = "0.1.0"

from .config import TelemetryConfig
from .errors import (
    ConfigurationError,
    ExportError,
    MetricError,
    RyzansteinError,
    SpanError,
    TelemetryError,
)
from .export import Exporter, ExportFormat, ExportedSpan
from .integration import HealthStatus, RyzansteinClient
from .telemetry import (
    HistogramStats,
    MetricNames,
    MetricsCollector,
    SpanGuard,
    SpanOperation,
    SpanRecord,
    SpanStatus,
    TelemetryCore,
    TelemetrySnapshot,
)

__all__ = [
    "__version__",
    "TelemetryConfig",
    "TelemetryCore",
    "TelemetrySnapshot",
    "SpanGuard",
    "SpanOperation",
    "SpanStatus",
    "SpanRecord",
    "MetricsCollector",
    "HistogramStats",
    "MetricNames",
    "Exporter",
    "ExportFormat",
    "ExportedSpan",
    "RyzansteinClient",
    "HealthStatus",
    "TelemetryError",
    "ConfigurationError",
    "ExportError",
    "SpanError",
    "MetricError",
    "RyzansteinError",
]
