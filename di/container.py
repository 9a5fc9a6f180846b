"""
Vessel - Dependency Injection Container

Provides a lightweight IoC container for managing application
dependencies with transient and singleton lifetimes.

Features:
- Service registration by type, pre-built instance or factory
- Constructor injection driven by type annotations
- Thread-safe, exactly-once singleton construction
- Cycle detection and up-front graph validation

The container is an ordinary object: create one per application (or per
test) and pass it to whoever needs it. There is no global instance.
"""

from __future__ import annotations

import inspect
from typing import (
    Any,
    Callable,
    Dict,
    Hashable,
    Optional,
    Type,
    TypeVar,
    overload,
)

from config import ContainerConfig, get_config
from core.errors import RegistrationError, ServiceNotRegisteredError, contract_name
from di.construction import ConstructorResolutionStrategy
from di.descriptor import ServiceDescriptor
from di.lifetime import ServiceLifetime
from di.registry import ServiceRegistry
from di.resolver import Resolver
from observability.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Container:
    """
    Dependency Injection Container.

    Manages service registration and resolution.

    Usage:
        container = Container()

        # Register services
        container.register_singleton(Logger, ConsoleLogger)
        container.register_transient(ReportService)
        container.register_factory(Settings, lambda: load_settings())

        # Resolve services
        reports = container.resolve(ReportService)
    """

    def __init__(self, config: Optional[ContainerConfig] = None) -> None:
        # Without an explicit config the process-wide one from get_config() applies
        self.config = config or get_config().container
        self._registry = ServiceRegistry(allow_overrides=self.config.allow_overrides)
        self._resolver = Resolver(
            self._registry,
            ConstructorResolutionStrategy(),
            trace_resolutions=self.config.trace_resolutions,
        )
        logger.debug("Container created", **self.config.to_dict())

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, descriptor: ServiceDescriptor) -> "Container":
        """Register a prepared descriptor, replacing any previous one."""
        self._registry.register(descriptor.contract, descriptor)
        return self

    def register_transient(
        self,
        contract: Hashable,
        implementation_type: Optional[type] = None,
    ) -> "Container":
        """Register a type that is constructed anew on every resolution."""
        implementation_type = self._implementation_for(contract, implementation_type)
        return self.register(ServiceDescriptor.for_type(
            contract, implementation_type, ServiceLifetime.TRANSIENT,
        ))

    def register_singleton(
        self,
        contract: Hashable,
        implementation: Any = None,
    ) -> "Container":
        """Register a shared service.

        ``implementation`` may be a class, constructed on first resolution,
        or an already built object, returned as is. When omitted the
        contract itself is the implementation.
        """
        if implementation is not None and not inspect.isclass(implementation):
            return self.register_instance(contract, implementation)

        implementation = self._implementation_for(contract, implementation)
        return self.register(ServiceDescriptor.for_type(
            contract, implementation, ServiceLifetime.SINGLETON,
        ))

    def register_instance(self, contract: Hashable, instance: Any) -> "Container":
        """Register an existing instance as singleton."""
        return self.register(ServiceDescriptor.for_instance(contract, instance))

    def register_factory(
        self,
        contract: Hashable,
        factory: Callable[..., Any],
        lifetime: ServiceLifetime = ServiceLifetime.TRANSIENT,
    ) -> "Container":
        """Register a factory function for creating instances.

        Annotated factory parameters are resolved from the container, the
        same way constructor parameters are.
        """
        return self.register(ServiceDescriptor.for_factory(contract, factory, lifetime))

    @staticmethod
    def _implementation_for(contract: Hashable, implementation_type: Optional[type]) -> type:
        if implementation_type is not None:
            return implementation_type
        if inspect.isclass(contract):
            return contract
        raise RegistrationError(
            f"Contract '{contract_name(contract)}' is not a class; "
            "an implementation type is required",
            contract=contract,
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    @overload
    def resolve(self, contract: Type[T]) -> T: ...

    @overload
    def resolve(self, contract: Hashable) -> Any: ...

    def resolve(self, contract: Any) -> Any:
        """Resolve a service instance."""
        return self._resolver.resolve(contract)

    def is_registered(self, contract: Hashable) -> bool:
        """Check if a service is registered."""
        return self._registry.contains(contract)

    def registrations(self) -> Dict[Hashable, ServiceDescriptor]:
        """Snapshot of the current contract -> descriptor map."""
        return self._registry.snapshot()

    def validate(self) -> None:
        """Check every registration without constructing anything.

        Raises the first problem found: a cycle, a required dependency
        without registration, or an implementation with no usable
        constructor.
        """
        for contract, descriptor in self._registry.snapshot().items():
            if descriptor.has_instance:
                continue
            self._resolver.ensure_acyclic(contract)
            plan = self._resolver.plan_for(descriptor)
            for param in plan.parameters:
                if param.contract is None or param.optional:
                    continue
                if not self._registry.contains(param.contract):
                    raise ServiceNotRegisteredError(param.contract, requested_by=contract)

        logger.debug("Container validated", registrations=len(self._registry))

    def __contains__(self, contract: Hashable) -> bool:
        return self._registry.contains(contract)

    def __repr__(self) -> str:
        return f"Container(registrations={len(self._registry)})"


def create_container(
    config: Optional[ContainerConfig] = None,
    configure: Optional[Callable[[Container], Any]] = None,
) -> Container:
    """
    Build a container and run an optional registration callback.

    Usage:
        def configure(container):
            container.register_singleton(Logger, ConsoleLogger)

        container = create_container(configure=configure)
    """
    container = Container(config)
    if configure is not None:
        configure(container)
        if container.config.validate_on_build:
            container.validate()
    return container
