"""
Exporter Tests

Unit tests for JSON export, OTLP document construction and OTLP submission.
"""

import json

import pytest
from unittest.mock import MagicMock, patch
from requests.exceptions import ConnectionError, Timeout

from sigma_telemetry import __version__
from sigma_telemetry.config import TelemetryConfig
from sigma_telemetry.errors import ExportError
from sigma_telemetry.export import ExportedSpan, Exporter, ExportFormat, build_otlp_document
from sigma_telemetry.telemetry import (
    SpanOperation,
    SpanRecord,
    SpanStatus,
    TelemetryCore,
)


@pytest.fixture
def sample_span():
    """Create a finished 42ms inference span."""
    return SpanRecord(
        name="test",
        service="ryzanstein",
        operation=SpanOperation.INFERENCE,
        start_time=1700000000.0,
        duration=0.042,
        attributes=(("model", "bitnet"),),
        status=SpanStatus.OK,
    )


@pytest.fixture
def error_span():
    """Create a failed custom span."""
    return SpanRecord(
        name="rerank",
        service="ryzanstein",
        operation=SpanOperation.custom("rerank"),
        start_time=1700000000.0,
        duration=0.0015,
        attributes=(("k", "1"), ("k", "2")),
        status=SpanStatus.error("timeout"),
    )


@pytest.fixture
def config():
    """Create configuration pointing at a local collector."""
    return TelemetryConfig(otlp_endpoint="http://collector:4318", export_timeout_secs=3.0)


def _otlp_spans(document):
    return document["resourceSpans"][0]["scopeSpans"][0]["spans"]


class TestExportedSpan:
    """Tests for ExportedSpan conversion."""

    def test_exported_span_conversion(self, sample_span):
        """Test rendered fields."""
        exported = ExportedSpan.from_record(sample_span)

        assert exported.operation == "inference"
        assert exported.status == "ok"
        assert exported.duration_ms == pytest.approx(42.0)
        assert exported.attributes == [("model", "bitnet")]

    def test_missing_duration(self):
        """Test that a span without duration exports a null duration."""
        record = SpanRecord(
            name="pending",
            service="ryzanstein",
            operation=SpanOperation.VAULT_STORE,
            start_time=0.0,
        )

        exported = ExportedSpan.from_record(record)

        assert exported.duration_ms is None
        assert exported.status == "unset"


class TestJsonExport:
    """Tests for JSON and STDOUT formats."""

    def test_json_export(self, config, sample_span):
        """Test that JSON output contains rendered values."""
        result = Exporter(config, ExportFormat.JSON).export([sample_span])

        assert "inference" in result
        assert "bitnet" in result
        assert "\n  " in result

    def test_json_round_trip(self, config, sample_span, error_span):
        """Test that parsed JSON matches the rendered records."""
        spans = [sample_span, error_span]
        parsed = json.loads(Exporter(config, ExportFormat.JSON).export(spans))

        assert len(parsed) == 2
        assert parsed[0] == {
            "name": "test",
            "service": "ryzanstein",
            "operation": "inference",
            "duration_ms": pytest.approx(42.0),
            "status": "ok",
            "attributes": [["model", "bitnet"]],
        }
        assert parsed[1]["operation"] == "custom.rerank"
        assert parsed[1]["status"] == "error: timeout"
        assert parsed[1]["attributes"] == [["k", "1"], ["k", "2"]]

    def test_stdout_matches_json(self, config, sample_span):
        """Test that STDOUT renders the same document as JSON."""
        as_json = Exporter(config, ExportFormat.JSON).export([sample_span])
        as_stdout = Exporter(config, ExportFormat.STDOUT).export([sample_span])

        assert as_json == as_stdout

    def test_empty_export(self, config):
        """Test exporting no spans."""
        assert json.loads(Exporter(config, "json").export([])) == []

    def test_export_core_spans(self, config):
        """Test exporting spans recorded through the core."""
        core = TelemetryCore(config)
        with core.start_span("generate", SpanOperation.INFERENCE) as span:
            span.set_attribute("model", "bitnet")

        parsed = json.loads(Exporter(config).export(core.spans(), core.snapshot()))

        assert parsed[0]["name"] == "generate"
        assert parsed[0]["duration_ms"] >= 0


class TestOtlpDocument:
    """Tests for OTLP document construction."""

    def test_document_shape(self, sample_span):
        """Test resource, scope and span nesting."""
        document = build_otlp_document([sample_span], "ryzanstein")

        resource_spans = document["resourceSpans"]
        assert len(resource_spans) == 1
        assert resource_spans[0]["resource"]["attributes"] == [
            {"key": "service.name", "value": {"stringValue": "ryzanstein"}}
        ]
        scope_spans = resource_spans[0]["scopeSpans"]
        assert len(scope_spans) == 1
        assert scope_spans[0]["scope"] == {"name": "sigma-telemetry", "version": __version__}

    def test_ok_span(self, sample_span):
        """Test attributes, status code and duration of an OK span."""
        span = _otlp_spans(build_otlp_document([sample_span], "ryzanstein"))[0]

        assert span["name"] == "test"
        assert span["kind"] == 1
        assert span["attributes"] == [{"key": "model", "value": {"stringValue": "bitnet"}}]
        assert span["status"] == {"code": 1}
        assert span["durationNanos"] == int(sample_span.duration_ms * 1_000_000)

    def test_error_span(self, error_span):
        """Test that error statuses map to code 2."""
        span = _otlp_spans(build_otlp_document([error_span], "ryzanstein"))[0]

        assert span["status"] == {"code": 2}
        assert span["durationNanos"] == int(error_span.duration_ms * 1_000_000)
        assert len(span["attributes"]) == 2

    def test_unset_span_without_duration(self):
        """Test that unset status maps to code 1 and missing duration to 0."""
        record = SpanRecord(
            name="pending",
            service="ryzanstein",
            operation=SpanOperation.INFERENCE,
            start_time=0.0,
        )

        span = _otlp_spans(build_otlp_document([record], "ryzanstein"))[0]

        assert span["status"] == {"code": 1}
        assert span["durationNanos"] == 0


class TestOtlpSubmission:
    """Tests for OTLP HTTP submission."""

    @patch("sigma_telemetry.export.exporter.requests.post")
    def test_success(self, mock_post, config, sample_span):
        """Test a 2xx response."""
        mock_post.return_value = MagicMock(status_code=200, text="")

        result = Exporter(config, ExportFormat.OTLP).export([sample_span])

        assert result == "Exported 1 spans to http://collector:4318/v1/traces"
        args, kwargs = mock_post.call_args
        assert args[0] == "http://collector:4318/v1/traces"
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["timeout"] == 3.0
        body = json.loads(kwargs["data"])
        assert _otlp_spans(body)[0]["name"] == "test"
        assert " " not in kwargs["data"]

    @patch("sigma_telemetry.export.exporter.requests.post")
    def test_snapshot_service_name(self, mock_post, config, sample_span):
        """Test that the snapshot's service labels the resource."""
        mock_post.return_value = MagicMock(status_code=202, text="")
        core = TelemetryCore(TelemetryConfig(service_name="edge-node"))

        Exporter(config, ExportFormat.OTLP).export([sample_span], core.snapshot())

        body = json.loads(mock_post.call_args.kwargs["data"])
        resource = body["resourceSpans"][0]["resource"]
        assert resource["attributes"][0]["value"]["stringValue"] == "edge-node"

    @patch("sigma_telemetry.export.exporter.requests.post")
    def test_non_success_status(self, mock_post, config, sample_span):
        """Test that collector rejections carry status and body."""
        mock_post.return_value = MagicMock(status_code=503, text="overloaded")

        with pytest.raises(ExportError) as exc_info:
            Exporter(config, ExportFormat.OTLP).export([sample_span])

        assert "503" in str(exc_info.value)
        assert "overloaded" in str(exc_info.value)

    @patch("sigma_telemetry.export.exporter.requests.post")
    def test_unreachable_endpoint(self, mock_post, config, sample_span):
        """Test that transport failures carry the endpoint and cause."""
        mock_post.side_effect = ConnectionError("connection refused")

        with pytest.raises(ExportError) as exc_info:
            Exporter(config, ExportFormat.OTLP).export([sample_span])

        message = str(exc_info.value)
        assert "http://collector:4318/v1/traces" in message
        assert "connection refused" in message

    @patch("sigma_telemetry.export.exporter.requests.post")
    def test_single_attempt(self, mock_post, config, sample_span):
        """Test that the exporter never retries."""
        mock_post.side_effect = Timeout("read timed out")

        with pytest.raises(ExportError):
            Exporter(config, ExportFormat.OTLP).export([sample_span])

        assert mock_post.call_count == 1

    def test_traces_url_strips_trailing_slash(self):
        """Test endpoint joining."""
        exporter = Exporter(TelemetryConfig(otlp_endpoint="http://c:4318/"), ExportFormat.OTLP)

        assert exporter.traces_url == "http://c:4318/v1/traces"
