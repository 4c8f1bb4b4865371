"""
Ryzanstein Client

HTTP client for the Ryzanstein runtime's health and telemetry endpoints.
"""

import logging

import requests
from pydantic import ValidationError
from requests.exceptions import RequestException

from ..config import TelemetryConfig
from ..errors import RyzansteinError
from ..telemetry.core import TelemetrySnapshot
from .models import HealthStatus


logger = logging.getLogger(__name__)


class RyzansteinClient:
    """
    Client for Ryzanstein telemetry hooks.

    Single attempt per call with a bounded timeout; no retries.
    """

    def __init__(self, config: TelemetryConfig, timeout: float = 5.0):
        """
        Initialize the client.

        Args:
            config: Telemetry configuration (uses ``ryzanstein_url``)
            timeout: Request timeout in seconds
        """
        self.base_url = config.ryzanstein_url.rstrip("/")
        self.timeout = timeout

    @staticmethod
    def fallback_health() -> HealthStatus:
        """Health status reported when Ryzanstein is unavailable."""
        return HealthStatus(
            status="unavailable",
            model_loaded=False,
            inference_count=0,
            uptime_secs=0.0,
        )

    def health_check(self) -> HealthStatus:
        """
        Probe Ryzanstein health.

        Returns:
            Parsed HealthStatus, or fallback_health() if the runtime is
            unreachable or answers with an unusable document
        """
        url = f"{self.base_url}/health"
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            return HealthStatus.model_validate(response.json())
        except RequestException as e:
            logger.warning(f"Ryzanstein health check at {url} failed: {e}")
        except (ValueError, ValidationError) as e:
            logger.warning(f"Ryzanstein returned an invalid health document: {e}")
        return self.fallback_health()

    def push_snapshot(self, snapshot: TelemetrySnapshot) -> None:
        """
        Push a telemetry snapshot to Ryzanstein.

        Raises:
            RyzansteinError: If the request fails or is rejected
        """
        url = f"{self.base_url}/v1/telemetry"
        try:
            response = requests.post(url, json=snapshot.model_dump(), timeout=self.timeout)
        except RequestException as e:
            raise RyzansteinError(f"{url}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RyzansteinError(f"{url} returned {response.status_code}: {response.text}")

        logger.debug(f"Pushed snapshot ({snapshot.span_count} spans) to {url}")
