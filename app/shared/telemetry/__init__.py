"""Shared telemetry: logging setup, OpenTelemetry tracing and the @traced decorator."""

from app.shared.telemetry.logging import get_logger, request_id_var, setup_logging
from app.shared.telemetry.telemetry import init_tracing, shutdown_tracing
from app.shared.telemetry.tracing import traced

__all__ = [
    "setup_logging",
    "get_logger",
    "request_id_var",
    "init_tracing",
    "shutdown_tracing",
    "traced",
]
