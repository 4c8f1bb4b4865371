"""
API Tests

Integration tests for the telemetry status endpoints.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from sigma_telemetry.api import create_app
from sigma_telemetry.integration import HealthStatus, RyzansteinClient
from sigma_telemetry.telemetry import SpanOperation, TelemetryCore


@pytest.fixture
def core():
    """Create a telemetry core with some recorded data."""
    core = TelemetryCore()
    with core.start_span("generate", SpanOperation.INFERENCE) as span:
        span.set_attribute("model", "bitnet")
    core.start_span("load", SpanOperation.MODEL_LOAD).set_error("missing weights")
    core.metrics.increment_by("ryzanstein.inference.tokens", 128)
    core.metrics.set_gauge("ryzanstein.system.gpu_utilization", 85.5)
    return core


@pytest.fixture
def client(core):
    """Create test client without a runtime client."""
    return TestClient(create_app(core))


@pytest.fixture
def mock_runtime():
    """Mock Ryzanstein client."""
    mock = MagicMock(spec=RyzansteinClient)
    mock.health_check.return_value = HealthStatus(
        status="healthy",
        model_loaded=True,
        inference_count=3,
        uptime_secs=60.0,
    )
    return mock


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_check_success(self, client):
        """Test health without runtime client."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "ryzanstein"
        assert data["span_count"] == 2
        assert data["runtime"] is None

    def test_health_includes_runtime(self, core, mock_runtime):
        """Test health with runtime client."""
        client = TestClient(create_app(core, mock_runtime))

        data = client.get("/health").json()

        assert data["runtime"]["status"] == "healthy"
        assert data["runtime"]["inference_count"] == 3
        mock_runtime.health_check.assert_called_once()


class TestTelemetryEndpoints:
    """Tests for snapshot, spans and metrics endpoints."""

    def test_snapshot(self, client):
        """Test snapshot endpoint."""
        data = client.get("/v1/snapshot").json()

        assert data["span_count"] == 2
        assert data["gauge_count"] == 1
        assert data["histogram_count"] == 2
        # spans.total, spans.errors, tokens
        assert data["counter_count"] == 3

    def test_spans(self, client):
        """Test spans endpoint returns the JSON export."""
        response = client.get("/v1/spans")

        assert response.status_code == 200
        spans = response.json()
        assert [span["operation"] for span in spans] == ["inference", "model.load"]
        assert spans[0]["attributes"] == [["model", "bitnet"]]
        assert spans[1]["status"] == "error: missing weights"

    def test_metrics(self, client):
        """Test Prometheus exposition."""
        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        body = response.text
        assert "spans_total 2.0" in body
        assert "spans_errors_total 1.0" in body
        assert "ryzanstein_system_gpu_utilization 85.5" in body
        assert "span_inference_duration_ms_count 1.0" in body
        assert "ryzanstein_system_memory_usage_mb" in body

    def test_metrics_scrape_does_not_register_gauges(self, client):
        """Test that scraping /metrics leaves the snapshot counts unchanged."""
        before = client.get("/v1/snapshot").json()
        body = client.get("/metrics").text
        after = client.get("/v1/snapshot").json()

        assert "ryzanstein_system_memory_usage_mb" in body
        assert after["gauge_count"] == before["gauge_count"] == 1
        assert after["counter_count"] == before["counter_count"]
