"""
Vessel - Configuration

Centralized configuration for containers and their ambient services.
Uses environment variables with sensible defaults.
"""
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from observability.logging import LoggingConfig, setup_logging, shutdown_logging

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


@dataclass
class ContainerConfig:
    """Behaviour switches for a Container."""
    # Re-registering a contract replaces the previous descriptor
    allow_overrides: bool = field(
        default_factory=lambda: _env_flag("VESSEL_ALLOW_OVERRIDES", "true")
    )
    # Wrap top-level resolutions in OpenTelemetry spans
    trace_resolutions: bool = field(
        default_factory=lambda: _env_flag("VESSEL_TRACE_RESOLUTIONS", "false")
    )
    # Run Container.validate() after create_container's configure callback
    validate_on_build: bool = field(
        default_factory=lambda: _env_flag("VESSEL_VALIDATE_ON_BUILD", "false")
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allow_overrides": self.allow_overrides,
            "trace_resolutions": self.trace_resolutions,
            "validate_on_build": self.validate_on_build,
        }


@dataclass
class Config:
    """Main configuration class combining all sub-configs."""
    container: ContainerConfig = field(default_factory=ContainerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_config: Optional[Config] = None


def get_config() -> Config:
    """Get the process configuration, creating it on first use."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Re-read the environment (and .env), rebuild the configuration and
    re-apply its logging settings."""
    global _config
    load_dotenv(override=True)
    _config = Config()
    shutdown_logging()
    setup_logging(_config.logging)
    return _config
