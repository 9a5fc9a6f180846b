"""
Tests for observability/logging.py.
"""
import logging

import pytest
import structlog

from observability.logging import (
    LogContext,
    LoggingConfig,
    get_logger,
    setup_logging,
    shutdown_logging,
)


@pytest.fixture
def fresh_logging():
    """Allow a test to run setup_logging, then restore quiet defaults."""
    shutdown_logging()
    yield
    shutdown_logging()
    setup_logging(LoggingConfig(level="WARNING"))


class TestLoggingConfig:

    def test_defaults_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FORMAT", "json")
        monkeypatch.setenv("VESSEL_SERVICE_NAME", "billing")

        config = LoggingConfig()

        assert config.level == "DEBUG"
        assert config.json_format is True
        assert config.service_name == "billing"


class TestSetupLogging:

    def test_configures_package_loggers(self, fresh_logging):
        setup_logging(LoggingConfig(level="debug", json_format=True))

        assert logging.getLogger("di").level == logging.DEBUG
        assert len(logging.getLogger("di").handlers) == 1

    def test_setup_is_idempotent(self, fresh_logging):
        setup_logging(LoggingConfig(level="INFO"))
        setup_logging(LoggingConfig(level="DEBUG"))

        assert logging.getLogger("di").level == logging.INFO

    def test_get_logger_returns_usable_logger(self):
        logger = get_logger("di.test")

        logger.debug("Registered service", contract="Logger", lifetime="singleton")


class TestLogContext:

    def test_binds_and_unbinds(self):
        with LogContext(container="app"):
            assert structlog.contextvars.get_contextvars()["container"] == "app"

        assert "container" not in structlog.contextvars.get_contextvars()
