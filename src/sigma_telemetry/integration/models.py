"""
Integration Models

Pydantic models for documents exchanged with the Ryzanstein runtime.
"""

from pydantic import BaseModel, ConfigDict, Field


class HealthStatus(BaseModel):
    """Health document returned by the runtime's /health endpoint."""

    model_config = ConfigDict(protected_namespaces=())

    status: str = Field(
        ...,
        description="Runtime status",
        examples=["healthy", "degraded", "unavailable"],
    )
    model_loaded: bool = Field(..., description="Whether a model is loaded")
    inference_count: int = Field(..., description="Inferences served", ge=0)
    uptime_secs: float = Field(..., description="Runtime uptime in seconds", ge=0.0)
