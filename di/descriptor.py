"""
Vessel - Service Descriptor

A descriptor binds one contract to exactly one implementation variant:
a concrete type built by constructor injection, a pre-built instance, or
a factory callable whose parameters are injected.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Hashable, Optional, Type, TypeVar

from core.errors import RegistrationError, contract_name
from di.lifetime import EMPTY, LifetimeGuard, ServiceLifetime

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class ServiceDescriptor(Generic[T]):
    """Describes how a service should be created and managed."""

    contract: Hashable
    implementation_type: Optional[Type[T]] = None
    factory: Optional[Callable[..., T]] = None
    instance: Any = EMPTY
    lifetime: ServiceLifetime = ServiceLifetime.TRANSIENT
    guard: LifetimeGuard[T] = field(default_factory=LifetimeGuard, repr=False)

    def __post_init__(self) -> None:
        variants = sum((
            self.implementation_type is not None,
            self.factory is not None,
            self.instance is not EMPTY,
        ))
        if variants != 1:
            raise RegistrationError(
                f"Registration for '{contract_name(self.contract)}' needs exactly one of "
                "implementation_type, factory or instance",
                contract=self.contract,
            )

        if self.instance is None:
            raise RegistrationError(
                f"Instance registered for '{contract_name(self.contract)}' is None",
                contract=self.contract,
            )

        if self.implementation_type is not None and not inspect.isclass(self.implementation_type):
            raise RegistrationError(
                f"Implementation for '{contract_name(self.contract)}' must be a class, "
                f"got {self.implementation_type!r}",
                contract=self.contract,
                suggestions=["Use register_factory for callables"],
            )

        if self.factory is not None and not callable(self.factory):
            raise RegistrationError(
                f"Factory for '{contract_name(self.contract)}' is not callable",
                contract=self.contract,
            )

        # Pre-built instances are shared no matter what lifetime was asked for
        if self.instance is not EMPTY and self.lifetime is not ServiceLifetime.SINGLETON:
            object.__setattr__(self, "lifetime", ServiceLifetime.SINGLETON)

    @classmethod
    def for_type(
        cls,
        contract: Hashable,
        implementation_type: Type[T],
        lifetime: ServiceLifetime,
    ) -> "ServiceDescriptor[T]":
        return cls(contract=contract, implementation_type=implementation_type, lifetime=lifetime)

    @classmethod
    def for_instance(cls, contract: Hashable, instance: T) -> "ServiceDescriptor[T]":
        return cls(contract=contract, instance=instance, lifetime=ServiceLifetime.SINGLETON)

    @classmethod
    def for_factory(
        cls,
        contract: Hashable,
        factory: Callable[..., T],
        lifetime: ServiceLifetime,
    ) -> "ServiceDescriptor[T]":
        return cls(contract=contract, factory=factory, lifetime=lifetime)

    @property
    def has_instance(self) -> bool:
        """True for pre-built instance registrations."""
        return self.instance is not EMPTY

    @property
    def is_singleton(self) -> bool:
        return self.lifetime is ServiceLifetime.SINGLETON

    @property
    def target(self) -> Any:
        """The type or factory that gets invoked to build the service."""
        if self.implementation_type is not None:
            return self.implementation_type
        if self.factory is not None:
            return self.factory
        return type(self.instance)

    def describe(self) -> str:
        if self.has_instance:
            kind = "instance"
        elif self.factory is not None:
            kind = "factory"
        else:
            kind = "type"
        return (
            f"{contract_name(self.contract)} -> {contract_name(self.target)} "
            f"({kind}, {self.lifetime.value})"
        )
