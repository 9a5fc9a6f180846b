"""
Vessel - Observability Package

Structured logging and tracing for the container.

Components:
- logging: Structlog integration with trace context propagation
- tracing: OpenTelemetry span helpers around service resolution

Usage:
    from observability import setup_logging, get_logger

    setup_logging(LoggingConfig(level="DEBUG"))
    logger = get_logger(__name__)
"""
from .logging import (
    LogContext,
    LoggingConfig,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from .tracing import create_span, get_tracer

__all__ = [
    # Logging
    "LogContext",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    # Tracing
    "create_span",
    "get_tracer",
]
