"""
Export Module

JSON and OTLP export of finished spans.
"""

from .exporter import Exporter, ExportFormat, build_otlp_document
from .models import ExportedSpan

__all__ = ["Exporter", "ExportFormat", "ExportedSpan", "build_otlp_document"]
