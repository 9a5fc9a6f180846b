"""
Vessel - Core Module

Foundational pieces shared by the container and its collaborators:
- Unified error hierarchy with severity and trace context

Usage:
    from core import ServiceNotRegisteredError, VesselError

    try:
        container.resolve(Logger)
    except VesselError as e:
        print(e.to_dict())
"""

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

__all__ = [
    # Base
    "VesselError",
    "ErrorContext",
    "ErrorSeverity",
    "contract_name",
    # Registration
    "RegistrationError",
    "DuplicateRegistrationError",
    # Resolution
    "ServiceNotRegisteredError",
    "NoSuitableConstructorError",
    "CircularDependencyError",
    "InstanceCreationError",
]
