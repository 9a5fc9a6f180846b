"""
Vessel - Dependency Injection Module

Provides the IoC container that builds object graphs on demand:
- Contracts mapped to implementation types, instances or factories
- Transient and singleton lifetimes
- Constructor injection from type annotations (richest signature wins)
- Exactly-once singleton construction under concurrent resolution
- Cycle detection and up-front validation

Design Principles:
    1. Dependency Inversion: Depend on contracts, not concretions
    2. Composition Root: All wiring happens at application startup
    3. Explicit Ownership: Containers are passed around, never global

Usage:
    from di import Container

    class Logger(Protocol):
        def log(self, message: str) -> None: ...

    container = Container()
    container.register_singleton(Logger, ConsoleLogger)
    container.register_transient(ReportService)

    reports = container.resolve(ReportService)
"""

from di.construction import (
    ConstructionPlan,
    ConstructorResolutionStrategy,
    PlanParameter,
)
from di.container import Container, create_container
from di.descriptor import ServiceDescriptor
from di.lifetime import LifetimeGuard, ServiceLifetime
from di.registry import ServiceRegistry
from di.resolver import Resolver

__all__ = [
    # Main container
    "Container",
    "create_container",

    # Registrations
    "ServiceDescriptor",
    "ServiceLifetime",
    "ServiceRegistry",

    # Resolution internals
    "ConstructionPlan",
    "ConstructorResolutionStrategy",
    "LifetimeGuard",
    "PlanParameter",
    "Resolver",
]
