"""
Span Exporter

Transforms finished spans into the generic JSON format or an OTLP
resource-spans document, and submits OTLP documents to a collector.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import requests
from opentelemetry.sdk.resources import SERVICE_NAME
from opentelemetry.trace import SpanKind, StatusCode
from requests.exceptions import RequestException

from .. import __version__
from ..config import TelemetryConfig
from ..errors import ExportError
from ..telemetry.core import TelemetrySnapshot
from ..telemetry.spans import SpanRecord
from .models import ExportedSpan


logger = logging.getLogger(__name__)

SCOPE_NAME = "sigma-telemetry"
TRACES_PATH = "/v1/traces"

# OTLP enumerates span kinds from 1 (SPAN_KIND_INTERNAL); the API enum starts at 0
OTLP_SPAN_KIND = SpanKind.INTERNAL.value + 1


class ExportFormat(str, Enum):
    """Export format."""

    OTLP = "otlp"
    JSON = "json"
    STDOUT = "stdout"


def build_otlp_document(spans: Sequence[SpanRecord], service_name: str) -> Dict[str, Any]:
    """
    Build an OTLP resource-spans document.

    Args:
        spans: Finished spans
        service_name: Value of the resource's ``service.name`` attribute

    Returns:
        Document with a single resource, scope and span list
    """
    otlp_spans: List[Dict[str, Any]] = []
    for span in spans:
        exported = ExportedSpan.from_record(span)
        if exported.status.startswith("error"):
            status_code = StatusCode.ERROR.value
        else:
            status_code = StatusCode.OK.value

        duration_nanos = 0
        if exported.duration_ms is not None:
            duration_nanos = int(exported.duration_ms * 1_000_000)

        otlp_spans.append(
            {
                "name": exported.name,
                "kind": OTLP_SPAN_KIND,
                "attributes": [
                    {"key": key, "value": {"stringValue": value}}
                    for key, value in exported.attributes
                ],
                "status": {"code": status_code},
                "durationNanos": duration_nanos,
            }
        )

    return {
        "resourceSpans": [
            {
                "resource": {
                    "attributes": [
                        {"key": SERVICE_NAME, "value": {"stringValue": service_name}},
                    ]
                },
                "scopeSpans": [
                    {
                        "scope": {"name": SCOPE_NAME, "version": __version__},
                        "spans": otlp_spans,
                    }
                ],
            }
        ]
    }


class Exporter:
    """
    Telemetry exporter.

    JSON and STDOUT render a pretty-printed array of ExportedSpan records.
    OTLP builds a resource-spans document and POSTs it to
    ``<otlp_endpoint>/v1/traces`` once per call, without retries.
    """

    def __init__(self, config: TelemetryConfig, format: ExportFormat = ExportFormat.JSON):
        """
        Create a new exporter.

        Args:
            config: Telemetry configuration (endpoint, service name, timeout)
            format: Output format
        """
        self.config = config
        self.format = ExportFormat(format)

    @property
    def traces_url(self) -> str:
        return f"{self.config.otlp_endpoint.rstrip('/')}{TRACES_PATH}"

    def export(
        self,
        spans: Sequence[SpanRecord],
        snapshot: Optional[TelemetrySnapshot] = None,
    ) -> str:
        """
        Export spans.

        Args:
            spans: Finished spans in recording order
            snapshot: Optional snapshot; its service name labels the OTLP resource

        Returns:
            Pretty JSON for JSON/STDOUT, a success message for OTLP

        Raises:
            ExportError: On serialization failure, collector rejection or
                unreachable endpoint
        """
        if self.format is ExportFormat.OTLP:
            service_name = snapshot.service if snapshot else self.config.service_name
            return self._submit_otlp(build_otlp_document(spans, service_name), len(spans))
        return self.to_json(spans)

    @staticmethod
    def to_json(spans: Sequence[SpanRecord]) -> str:
        """Render spans as a pretty-printed JSON array."""
        exported = [ExportedSpan.from_record(span).model_dump(mode="json") for span in spans]
        try:
            return json.dumps(exported, indent=2)
        except (TypeError, ValueError) as e:
            raise ExportError(f"Failed to serialize spans: {e}") from e

    def _submit_otlp(self, document: Dict[str, Any], span_count: int) -> str:
        url = self.traces_url
        try:
            body = json.dumps(document, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise ExportError(f"Failed to serialize OTLP document: {e}") from e

        try:
            response = requests.post(
                url,
                data=body,
                headers={"Content-Type": "application/json"},
                timeout=self.config.export_timeout_secs,
            )
        except RequestException as e:
            logger.error(f"OTLP export to {url} failed: {e}")
            raise ExportError(f"Failed to reach OTLP endpoint {url}: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"OTLP collector at {url} returned {response.status_code}")
            raise ExportError(
                f"OTLP collector returned {response.status_code}: {response.text}"
            )

        message = f"Exported {span_count} spans to {url}"
        logger.info(message)
        return message
