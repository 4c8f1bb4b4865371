"""
API Models

Pydantic response models for the telemetry status API.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ..integration.models import HealthStatus


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Telemetry service status",
        examples=["healthy"],
    )

    service: str = Field(..., description="Service name")

    span_count: int = Field(
        ...,
        description="Number of finished spans buffered",
        ge=0,
    )

    uptime_secs: float = Field(
        ...,
        description="Telemetry core uptime in seconds",
        ge=0.0,
    )

    runtime: Optional[HealthStatus] = Field(
        default=None,
        description="Ryzanstein runtime health, when a client is configured",
    )
