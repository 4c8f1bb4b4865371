"""
Telemetry Core

Span lifecycle management and the span buffer.

A SpanGuard is recorded exactly once: explicitly via set_ok()/set_error(),
or implicitly when a ``with`` block exits or the guard is garbage collected
while still active.
"""

import logging
import time
from threading import Lock, RLock
from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from ..config import TelemetryConfig
from ..errors import SpanError
from .metric_names import MetricNames
from .metrics_collector import MetricsCollector
from .spans import SpanOperation, SpanRecord, SpanStatus


logger = logging.getLogger(__name__)

SpanTemplate = Tuple[SpanOperation, Sequence[Tuple[str, str]]]


class TelemetrySnapshot(BaseModel):
    """Point-in-time view of buffered spans and registered metrics."""

    service: str = Field(..., description="Service name")
    span_count: int = Field(..., description="Number of finished spans buffered", ge=0)
    counter_count: int = Field(..., description="Number of distinct counters", ge=0)
    gauge_count: int = Field(..., description="Number of distinct gauges", ge=0)
    histogram_count: int = Field(..., description="Number of distinct histograms", ge=0)
    uptime_secs: float = Field(..., description="Seconds since the core was created", ge=0.0)


class SpanGuard:
    """
    Handle for one in-flight span.

    Mutated by its owner while active; finalized once with set_ok(),
    set_error(), on leaving a ``with`` block, or on garbage collection.
    """

    def __init__(self, core: "TelemetryCore", name: str, operation: SpanOperation):
        self._core = core
        self._name = name
        self._service = core.service_name
        self._operation = operation
        self._start_time = time.time()
        self._start = time.perf_counter()
        self._attributes: List[Tuple[str, str]] = []
        self._lock = Lock()
        self._finished = False

    @property
    def name(self) -> str:
        """Span name."""
        return self._name

    @property
    def operation(self) -> SpanOperation:
        """Operation kind of the span."""
        return self._operation

    @property
    def attributes(self) -> Tuple[Tuple[str, str], ...]:
        """Attributes added so far, in insertion order."""
        with self._lock:
            return tuple(self._attributes)

    @property
    def is_finished(self) -> bool:
        """Whether the span has been recorded."""
        return self._finished

    def set_attribute(self, key: str, value: str) -> None:
        """
        Add an attribute to the span.

        Duplicate keys are kept; attributes preserve insertion order.

        Raises:
            SpanError: If the span is already finished
        """
        with self._lock:
            if self._finished:
                raise SpanError(f"cannot set attribute on finished span '{self._name}'")
            self._attributes.append((str(key), str(value)))

    def set_attributes(self, attributes: Iterable[Tuple[str, str]]) -> None:
        """Add several attributes in order."""
        for key, value in attributes:
            self.set_attribute(key, value)

    def set_ok(self) -> SpanRecord:
        """Mark span as OK and record it."""
        return self._finish(SpanStatus.OK)

    def set_error(self, message: str) -> SpanRecord:
        """Mark span as error and record it."""
        return self._finish(SpanStatus.error(message))

    def _finish(self, status: SpanStatus, strict: bool = True) -> Optional[SpanRecord]:
        with self._lock:
            if self._finished:
                if strict:
                    raise SpanError(f"span '{self._name}' already finished")
                return None
            self._finished = True
            record = SpanRecord(
                name=self._name,
                service=self._service,
                operation=self._operation,
                start_time=self._start_time,
                duration=time.perf_counter() - self._start,
                attributes=tuple(self._attributes),
                status=status,
            )

        self._core.record_span(record)
        return record

    def __enter__(self) -> "SpanGuard":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            self._finish(SpanStatus.OK, strict=False)
        else:
            self._finish(SpanStatus.error(str(exc) or exc_type.__name__), strict=False)
        return False

    def __del__(self):
        # __init__ may not have completed
        if not getattr(self, "_finished", True):
            self._finish(SpanStatus.OK, strict=False)


class TelemetryCore:
    """
    Core telemetry system for Ryzanstein.

    Owns one MetricsCollector and an append-only buffer of finished spans.
    """

    def __init__(self, config: Optional[TelemetryConfig] = None):
        """
        Create a new telemetry instance.

        Args:
            config: Telemetry configuration (default: built-in defaults)
        """
        self.config = config or TelemetryConfig()
        self._metrics = MetricsCollector()
        self._spans: List[SpanRecord] = []
        # Reentrant: a guard collected while this lock is held records from __del__
        self._spans_lock = RLock()
        self._created = time.perf_counter()

        logger.info(f"TelemetryCore initialized for service '{self.config.service_name}'")

    @property
    def service_name(self) -> str:
        """Service name stamped on every span."""
        return self.config.service_name

    @property
    def metrics(self) -> MetricsCollector:
        """The metrics collector, for direct counter/gauge/histogram use."""
        return self._metrics

    def start_span(self, name: str, operation: SpanOperation) -> SpanGuard:
        """
        Start a new span.

        Args:
            name: Free-text span name
            operation: Operation kind

        Returns:
            SpanGuard: Active span handle
        """
        return SpanGuard(self, name, operation)

    def start_span_from_template(self, name: str, template: SpanTemplate) -> SpanGuard:
        """Start a span with a template's operation and attributes applied."""
        operation, attributes = template
        span = self.start_span(name, operation)
        span.set_attributes(attributes)
        return span

    def record_span(self, span: SpanRecord) -> None:
        """
        Record a completed span.

        Updates ``spans.total``, ``spans.errors`` and the per-operation
        duration histogram, then appends the span to the buffer.
        """
        self._metrics.increment(MetricNames.SPANS_TOTAL)
        if span.status.is_error:
            self._metrics.increment(MetricNames.SPANS_ERRORS)
        if span.duration_ms is not None:
            self._metrics.record_histogram(
                MetricNames.span_duration(span.operation), span.duration_ms
            )

        with self._spans_lock:
            self._spans.append(span)

        logger.debug(
            f"Span recorded - {span.name} ({span.operation}), "
            f"status: {span.status}, duration: {span.duration_ms}ms"
        )

    def spans(self) -> List[SpanRecord]:
        """Copy of the finished spans, in recording order."""
        with self._spans_lock:
            return list(self._spans)

    def snapshot(self) -> TelemetrySnapshot:
        """Get telemetry snapshot."""
        with self._spans_lock:
            span_count = len(self._spans)
        counter_count, gauge_count, histogram_count = self._metrics.registered_counts()

        return TelemetrySnapshot(
            service=self.config.service_name,
            span_count=span_count,
            counter_count=counter_count,
            gauge_count=gauge_count,
            histogram_count=histogram_count,
            uptime_secs=time.perf_counter() - self._created,
        )
