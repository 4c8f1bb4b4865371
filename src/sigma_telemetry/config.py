"""
Telemetry Configuration

Pydantic settings model for the telemetry core, exporter and runtime client.
Values come from keyword arguments or from the environment (with .env support).
"""

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError


logger = logging.getLogger(__name__)

ENV_PREFIX = "SIGMA_"


class TelemetryConfig(BaseModel):
    """Telemetry configuration."""

    service_name: str = Field(
        default="ryzanstein",
        description="Service name used for span attribution",
        min_length=1,
    )

    otlp_endpoint: str = Field(
        default="http://localhost:4317",
        description="Base URL of the OTLP collector (traces go to /v1/traces)",
    )

    sampling_rate: float = Field(
        default=1.0,
        description="Sampling rate (pass-through, no sampling is applied by the core)",
        ge=0.0,
        le=1.0,
    )

    metrics_enabled: bool = Field(
        default=True,
        description="Enable metrics collection",
    )

    traces_enabled: bool = Field(
        default=True,
        description="Enable trace export",
    )

    ryzanstein_url: str = Field(
        default="http://localhost:8000",
        description="Ryzanstein inference runtime API URL",
    )

    export_interval_secs: int = Field(
        default=10,
        description="Batch export interval in seconds",
        ge=0,
    )

    max_buffer_size: int = Field(
        default=1024,
        description="Maximum spans to buffer before flush (pass-through)",
        ge=0,
    )

    export_timeout_secs: float = Field(
        default=10.0,
        description="Timeout for a single OTLP export request in seconds",
        gt=0.0,
    )

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides: Any) -> "TelemetryConfig":
        """
        Build configuration from SIGMA_* environment variables.

        Args:
            env_file: Optional path to a .env file (default: search from cwd)
            **overrides: Explicit values that take precedence over the environment

        Returns:
            TelemetryConfig: Validated configuration

        Raises:
            ConfigurationError: If a value is malformed or out of range
        """
        load_dotenv(env_file)

        values: Dict[str, Any] = {}
        for field_name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is not None:
                values[field_name] = raw
        values.update(overrides)

        try:
            config = cls(**values)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

        logger.debug(f"Loaded telemetry configuration for service '{config.service_name}'")
        return config
