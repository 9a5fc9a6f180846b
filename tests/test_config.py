"""
Tests for config.py - environment-driven configuration.
"""
import logging

import pytest

import config as config_module
from config import Config, ContainerConfig, get_config, reload_config
from di import Container, create_container
from observability.logging import LoggingConfig, setup_logging, shutdown_logging


@pytest.fixture
def fresh_config(monkeypatch):
    """Drop the cached process config so the test reads the environment."""
    monkeypatch.setattr(config_module, "_config", None)
    yield
    shutdown_logging()
    setup_logging(LoggingConfig(level="WARNING"))


class TestContainerConfig:

    def test_defaults(self, monkeypatch):
        for name in ("VESSEL_ALLOW_OVERRIDES", "VESSEL_TRACE_RESOLUTIONS", "VESSEL_VALIDATE_ON_BUILD"):
            monkeypatch.delenv(name, raising=False)

        config = ContainerConfig()

        assert config.allow_overrides is True
        assert config.trace_resolutions is False
        assert config.validate_on_build is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("VESSEL_ALLOW_OVERRIDES", "false")
        monkeypatch.setenv("VESSEL_TRACE_RESOLUTIONS", "1")
        monkeypatch.setenv("VESSEL_VALIDATE_ON_BUILD", "yes")

        config = ContainerConfig()

        assert config.to_dict() == {
            "allow_overrides": False,
            "trace_resolutions": True,
            "validate_on_build": True,
        }


class TestProcessConfig:

    def test_get_config_is_cached(self, fresh_config):
        assert get_config() is get_config()

    def test_combines_sub_configs(self, fresh_config, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "info")

        config = get_config()

        assert isinstance(config, Config)
        assert isinstance(config.container, ContainerConfig)
        assert config.logging.level == "INFO"

    def test_container_defaults_to_process_config(self, fresh_config, monkeypatch):
        monkeypatch.setenv("VESSEL_ALLOW_OVERRIDES", "false")

        container = Container()

        assert container.config is get_config().container
        assert container.config.allow_overrides is False

    def test_create_container_defaults_to_process_config(self, fresh_config, monkeypatch):
        monkeypatch.setenv("VESSEL_VALIDATE_ON_BUILD", "true")

        container = create_container()

        assert container.config.validate_on_build is True

    def test_explicit_config_wins(self, fresh_config, monkeypatch):
        monkeypatch.setenv("VESSEL_ALLOW_OVERRIDES", "false")
        explicit = ContainerConfig(
            allow_overrides=True,
            trace_resolutions=False,
            validate_on_build=False,
        )

        assert Container(explicit).config is explicit

    def test_reload_config(self, fresh_config, monkeypatch):
        first = get_config()
        monkeypatch.setenv("VESSEL_TRACE_RESOLUTIONS", "true")

        reloaded = reload_config()

        assert reloaded is not first
        assert reloaded.container.trace_resolutions is True
        assert get_config() is reloaded

    def test_reload_applies_logging_level(self, fresh_config, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        reload_config()

        assert logging.getLogger("di").level == logging.DEBUG
