"""
API Module

FastAPI status application for the telemetry core.
"""

from .main import create_app
from .models import HealthResponse

__all__ = ["create_app", "HealthResponse"]
