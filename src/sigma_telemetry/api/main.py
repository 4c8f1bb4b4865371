"""
FastAPI Application

HTTP status surface for a TelemetryCore: health, snapshot, spans and
Prometheus metrics.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from .. import __version__
from ..errors import TelemetryError
from ..export import Exporter, ExportFormat
from ..integration import RyzansteinClient
from ..telemetry import TelemetryCore, TelemetrySnapshot, render_prometheus
from .models import HealthResponse


logger = logging.getLogger(__name__)


def create_app(core: TelemetryCore, client: Optional[RyzansteinClient] = None) -> FastAPI:
    """
    Create the status application.

    Args:
        core: Telemetry core to expose
        client: Optional Ryzanstein client; when set, /health includes runtime health

    Returns:
        FastAPI: Configured application
    """
    app = FastAPI(
        title="Sigma Telemetry",
        description="Spans and metrics of the Ryzanstein inference runtime",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.core = core
    app.state.client = client

    @app.exception_handler(TelemetryError)
    async def telemetry_exception_handler(request: Request, exc: TelemetryError):
        """Report telemetry failures as 500 with their cause."""
        logger.error(f"Telemetry error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "telemetry_error",
                "message": str(exc),
            },
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check():
        """
        Health check endpoint.

        Returns buffered span count, uptime and, if configured, the
        Ryzanstein runtime's health.
        """
        snapshot = core.snapshot()
        runtime = client.health_check() if client else None
        return HealthResponse(
            status="healthy",
            service=snapshot.service,
            span_count=snapshot.span_count,
            uptime_secs=snapshot.uptime_secs,
            runtime=runtime,
        )

    @app.get("/v1/snapshot", response_model=TelemetrySnapshot, tags=["Telemetry"])
    async def get_snapshot():
        """Point-in-time telemetry snapshot."""
        return core.snapshot()

    @app.get("/v1/spans", tags=["Telemetry"])
    async def get_spans():
        """Finished spans in the generic JSON export format."""
        body = Exporter(core.config, ExportFormat.JSON).export(core.spans())
        return Response(content=body, media_type="application/json")

    @app.get("/metrics", tags=["Telemetry"])
    async def get_metrics():
        """Prometheus metrics endpoint."""
        payload, content_type = render_prometheus(core.metrics)
        return Response(content=payload, media_type=content_type)

    return app
