"""
Vessel - Test Configuration

Pytest fixtures and configuration for all tests.
"""
import pytest

from config import ContainerConfig
from di import Container


@pytest.fixture
def container_config() -> ContainerConfig:
    """Default container configuration, independent of the environment."""
    return ContainerConfig(
        allow_overrides=True,
        trace_resolutions=False,
        validate_on_build=False,
    )


@pytest.fixture
def container(container_config) -> Container:
    """Fresh, empty container."""
    return Container(container_config)


@pytest.fixture
def strict_container() -> Container:
    """Container that refuses duplicate registrations."""
    return Container(ContainerConfig(
        allow_overrides=False,
        trace_resolutions=False,
        validate_on_build=False,
    ))
