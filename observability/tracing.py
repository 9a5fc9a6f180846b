"""
Vessel - Tracing with OpenTelemetry

Thin helpers over the OpenTelemetry API. The container only depends on the
API package; spans are exported when the host application installs and
configures an SDK tracer provider, and are no-ops otherwise.

Usage:
    from observability.tracing import get_tracer, create_span

    with create_span("vessel.resolve", {"vessel.contract": "Logger"}):
        ...
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace

TRACER_NAME = "vessel"


def get_tracer(name: str = TRACER_NAME) -> trace.Tracer:
    """Get a tracer from the globally configured provider."""
    return trace.get_tracer(name)


@contextmanager
def create_span(
    name: str,
    attributes: Optional[Dict[str, Any]] = None,
    tracer: Optional[trace.Tracer] = None,
) -> Iterator[trace.Span]:
    """
    Run a block inside a new span.

    Exceptions are recorded on the span and re-raised.
    """
    tracer = tracer or get_tracer()
    with tracer.start_as_current_span(
        name,
        attributes=attributes or {},
        record_exception=True,
        set_status_on_exception=True,
    ) as span:
        yield span
