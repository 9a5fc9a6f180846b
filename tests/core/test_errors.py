"""
Tests for core/errors.py - error taxonomy and span recording.
"""
from unittest.mock import Mock, patch

from core.errors import (
    CircularDependencyError,
    DuplicateRegistrationError,
    ErrorContext,
    ErrorSeverity,
    InstanceCreationError,
    NoSuitableConstructorError,
    RegistrationError,
    ServiceNotRegisteredError,
    VesselError,
    contract_name,
)


class Logger:
    pass


class Service:
    pass


class TestContractName:

    def test_class(self):
        assert contract_name(Logger) == "Logger"

    def test_token(self):
        assert contract_name("logger") == "'logger'"

    def test_nested_class(self):
        class Inner:
            pass

        assert contract_name(Inner).endswith("<locals>.Inner")


class TestErrorTaxonomy:

    def test_not_registered(self):
        error = ServiceNotRegisteredError(Logger, requested_by=Service)

        assert isinstance(error, VesselError)
        assert isinstance(error, LookupError)
        assert error.error_code == "SERVICE_NOT_REGISTERED"
        assert error.severity is ErrorSeverity.CRITICAL
        assert str(error) == (
            "[SERVICE_NOT_REGISTERED] Service 'Logger' is not registered "
            "(required by 'Service')"
        )
        assert error.suggestions == ["Register an implementation for 'Logger'"]

    def test_no_suitable_constructor(self):
        error = NoSuitableConstructorError(Logger, "class is abstract")

        assert isinstance(error, TypeError)
        assert error.reason == "class is abstract"
        assert "No suitable constructor for 'Logger'" in str(error)

    def test_circular_dependency(self):
        error = CircularDependencyError([Logger, Service, Logger])

        assert isinstance(error, RecursionError)
        assert error.path == (Logger, Service, Logger)
        assert error.message == "Circular dependency detected: Logger -> Service -> Logger"

    def test_instance_creation(self):
        cause = RuntimeError("boom")
        error = InstanceCreationError(Logger, cause)

        assert error.cause is cause
        assert error.severity is ErrorSeverity.ERROR
        assert str(error) == (
            "[INSTANCE_CREATION_FAILED] Failed to create 'Logger' "
            "[caused by: RuntimeError('boom')]"
        )

    def test_duplicate_registration(self):
        error = DuplicateRegistrationError(Logger)

        assert isinstance(error, RegistrationError)
        assert error.contract is Logger
        assert error.suggestions

    def test_to_dict(self):
        context = ErrorContext(operation="resolve", component="di.resolver")
        error = InstanceCreationError(Logger, ValueError("bad"), context=context)

        data = error.to_dict()

        assert data["error_code"] == "INSTANCE_CREATION_FAILED"
        assert data["severity"] == "error"
        assert data["cause"] == "bad"
        assert data["context"]["operation"] == "resolve"
        assert data["context"]["component"] == "di.resolver"


class TestSpanRecording:

    def test_recorded_on_active_span(self):
        span = Mock()
        span.is_recording.return_value = True

        with patch("core.errors.trace.get_current_span", return_value=span):
            error = ServiceNotRegisteredError(Logger)

        span.record_exception.assert_called_once_with(error)
        span.set_attribute.assert_any_call("error.code", "SERVICE_NOT_REGISTERED")
        span.set_attribute.assert_any_call("error.severity", "critical")

    def test_skipped_without_recording_span(self):
        span = Mock()
        span.is_recording.return_value = False

        with patch("core.errors.trace.get_current_span", return_value=span):
            ServiceNotRegisteredError(Logger)

        span.record_exception.assert_not_called()

    def test_context_from_current_span(self):
        span = Mock()
        span.is_recording.return_value = True
        span.get_span_context.return_value = Mock(is_valid=True, trace_id=1, span_id=2)

        with patch("core.errors.trace.get_current_span", return_value=span):
            context = ErrorContext.from_current_span("resolve", "di.resolver")

        assert context.trace_id == format(1, "032x")
        assert context.span_id == format(2, "016x")
