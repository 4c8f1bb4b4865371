"""
Export Models

Pydantic models for the generic JSON span export.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from ..telemetry.spans import SpanRecord


class ExportedSpan(BaseModel):
    """Exported span in wire format."""

    name: str = Field(..., description="Span name")
    service: str = Field(..., description="Owning service")
    operation: str = Field(
        ...,
        description="Dotted operation name",
        examples=["inference", "model.load", "custom.rerank"],
    )
    duration_ms: Optional[float] = Field(
        default=None,
        description="Span duration in milliseconds",
    )
    status: str = Field(
        ...,
        description="Span status",
        examples=["ok", "unset", "error: decode failure"],
    )
    attributes: List[Tuple[str, str]] = Field(
        default_factory=list,
        description="Attribute pairs in insertion order",
    )

    @classmethod
    def from_record(cls, record: SpanRecord) -> "ExportedSpan":
        return cls(
            name=record.name,
            service=record.service,
            operation=str(record.operation),
            duration_ms=record.duration_ms,
            status=str(record.status),
            attributes=list(record.attributes),
        )
