"""
Integration Module

Client for the Ryzanstein inference runtime.
"""

from .client import RyzansteinClient
from .models import HealthStatus

__all__ = ["RyzansteinClient", "HealthStatus"]
