"""
Telemetry Errors

Exception hierarchy for configuration, export, span and runtime-client failures.
"""


class TelemetryError(Exception):
    """Base class for all sigma-telemetry errors."""


class ConfigurationError(TelemetryError):
    """Malformed or missing configuration value."""

    def __init__(self, message: str):
        super().__init__(f"Configuration error: {message}")


class ExportError(TelemetryError):
    """Serialization failure, collector rejection or unreachable endpoint."""

    def __init__(self, message: str):
        super().__init__(f"Export error: {message}")


class SpanError(TelemetryError):
    """Invalid operation on a span handle (e.g. mutating a finished span)."""

    def __init__(self, message: str):
        super().__init__(f"Span error: {message}")


class MetricError(TelemetryError):
    """Reserved for structural validation of metric names and values."""

    def __init__(self, message: str):
        super().__init__(f"Metric error: {message}")


class RyzansteinError(TelemetryError):
    """Failure talking to the Ryzanstein inference runtime."""

    def __init__(self, message: str):
        super().__init__(f"Ryzanstein connection error: {message}")
