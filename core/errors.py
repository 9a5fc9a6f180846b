"""
Vessel - Unified Error Handling

Provides the error hierarchy raised by the container during registration
and resolution.

Features:
- Hierarchical exception classes with context preservation
- Error severity levels for prioritized handling
- Structured error context for debugging
- OpenTelemetry integration for error tracing

Resolution errors describe configuration defects, so none of them are
retried by the container.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Sequence

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode


class ErrorSeverity(Enum):
    """Error severity levels for prioritized handling."""

    WARNING = "warning"    # Potential problem, degraded operation
    ERROR = "error"        # Significant failure, operation failed
    CRITICAL = "critical"  # Broken configuration, requires a fix


@dataclass
class ErrorContext:
    """Structured context for error debugging and tracing."""

    operation: str
    component: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    trace_id: Optional[str] = None
    span_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for serialization."""
        return {
            "operation": self.operation,
            "component": self.component,
            "timestamp": self.timestamp.isoformat(),
            "trace_id": self.trace_id,
            "span_id": self.span_id,
            "metadata": self.metadata,
        }

    @classmethod
    def from_current_span(
        cls,
        operation: str,
        component: str,
        **kwargs: Any
    ) -> "ErrorContext":
        """Create context from current OpenTelemetry span."""
        span = trace.get_current_span()
        trace_id = None
        span_id = None

        if span and span.is_recording():
            ctx = span.get_span_context()
            if ctx.is_valid:
                trace_id = format(ctx.trace_id, "032x")
                span_id = format(ctx.span_id, "016x")

        return cls(
            operation=operation,
            component=component,
            trace_id=trace_id,
            span_id=span_id,
            **kwargs
        )


def contract_name(contract: Any) -> str:
    """Human-readable name for a contract or implementation."""
    name = getattr(contract, "__qualname__", None) or getattr(contract, "__name__", None)
    if isinstance(name, str):
        return name
    return repr(contract)


class VesselError(Exception):
    """
    Base exception for all container errors.

    Provides:
    - Structured error context
    - Severity level
    - Chained exception support
    - OpenTelemetry span recording
    """

    default_severity: ErrorSeverity = ErrorSeverity.ERROR
    error_code: str = "VESSEL_ERROR"

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        severity: Optional[ErrorSeverity] = None,
        cause: Optional[BaseException] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.severity = severity or self.default_severity
        self.cause = cause
        self.suggestions = suggestions or []
        self.timestamp = datetime.now(timezone.utc)

        # Record to current span if available
        self._record_to_span()

    def _record_to_span(self) -> None:
        """Record exception to current OpenTelemetry span."""
        span = trace.get_current_span()
        if span and span.is_recording():
            span.set_status(Status(StatusCode.ERROR, self.message))
            span.record_exception(self)
            span.set_attribute("error.code", self.error_code)
            span.set_attribute("error.severity", self.severity.value)
            if self.context:
                span.set_attribute("error.component", self.context.component)
                span.set_attribute("error.operation", self.context.operation)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for diagnostics."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "suggestions": self.suggestions,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context.to_dict() if self.context else None,
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        parts = [f"[{self.error_code}] {self.message}"]
        if self.cause:
            parts.append(f" [caused by: {self.cause!r}]")
        return "".join(parts)


class RegistrationError(VesselError):
    """Invalid service registration."""

    error_code = "REGISTRATION_ERROR"
    default_severity = ErrorSeverity.CRITICAL

    def __init__(self, message: str, contract: Any = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.contract = contract


class DuplicateRegistrationError(RegistrationError):
    """A contract was registered twice while overrides are disabled."""

    error_code = "DUPLICATE_REGISTRATION"

    def __init__(self, contract: Hashable, **kwargs: Any):
        super().__init__(
            f"Service '{contract_name(contract)}' is already registered",
            contract=contract,
            suggestions=["Enable allow_overrides to replace existing registrations"],
            **kwargs,
        )


class ServiceNotRegisteredError(VesselError, LookupError):
    """No descriptor exists for the requested contract."""

    error_code = "SERVICE_NOT_REGISTERED"
    default_severity = ErrorSeverity.CRITICAL

    def __init__(
        self,
        contract: Hashable,
        requested_by: Optional[Hashable] = None,
        **kwargs: Any,
    ):
        message = f"Service '{contract_name(contract)}' is not registered"
        if requested_by is not None:
            message += f" (required by '{contract_name(requested_by)}')"
        kwargs.setdefault(
            "suggestions",
            [f"Register an implementation for '{contract_name(contract)}'"],
        )
        super().__init__(message, **kwargs)
        self.contract = contract
        self.requested_by = requested_by


class NoSuitableConstructorError(VesselError, TypeError):
    """The construction strategy found no usable signature."""

    error_code = "NO_SUITABLE_CONSTRUCTOR"
    default_severity = ErrorSeverity.CRITICAL

    def __init__(self, concrete_type: Any, reason: str, **kwargs: Any):
        super().__init__(
            f"No suitable constructor for '{contract_name(concrete_type)}': {reason}",
            **kwargs,
        )
        self.concrete_type = concrete_type
        self.reason = reason


class CircularDependencyError(VesselError, RecursionError):
    """A dependency chain revisits a contract already being resolved."""

    error_code = "CIRCULAR_DEPENDENCY"
    default_severity = ErrorSeverity.CRITICAL

    def __init__(self, path: Sequence[Hashable], **kwargs: Any):
        self.path = tuple(path)
        rendered = " -> ".join(contract_name(c) for c in self.path)
        super().__init__(f"Circular dependency detected: {rendered}", **kwargs)


class InstanceCreationError(VesselError):
    """The constructor or factory of a service raised."""

    error_code = "INSTANCE_CREATION_FAILED"
    default_severity = ErrorSeverity.ERROR

    def __init__(self, contract: Hashable, cause: BaseException, **kwargs: Any):
        super().__init__(
            f"Failed to create '{contract_name(contract)}'",
            cause=cause,
            **kwargs,
        )
        self.contract = contract
