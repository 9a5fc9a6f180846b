"""
Vessel - Resolver

Turns a contract into an instance: looks up the descriptor, applies its
lifetime, resolves constructor dependencies recursively and invokes the
constructor or factory.

Two separate mechanisms keep resolution safe:
    - the resolution chain, an immutable tuple of the contracts currently
      being resolved on this call stack, detects cycles;
    - each singleton descriptor's LifetimeGuard lock makes sure the shared
      instance is built once, even when many threads ask for it at once.

The chain is checked before any guard lock is taken, so a thread can never
wait on a lock it already holds. While a constructor or factory runs, its
chain is also published per thread, so a factory that calls back into
``resolve`` continues the same chain instead of starting a fresh one.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Hashable, Optional, Set, Tuple, Type, TypeVar, overload

from core.errors import (
    CircularDependencyError,
    ErrorContext,
    InstanceCreationError,
    NoSuitableConstructorError,
    ServiceNotRegisteredError,
    VesselError,
    contract_name,
)
from di.construction import ConstructionPlan, ConstructorResolutionStrategy, describe_plan
from di.descriptor import ServiceDescriptor
from di.registry import ServiceRegistry
from observability.logging import get_logger
from observability.tracing import create_span

logger = get_logger(__name__)

T = TypeVar("T")

Chain = Tuple[Hashable, ...]

# Failures of an optional dependency that bind the parameter's default.
# Cycles and constructor errors still propagate.
_DEFAULT_ON = (ServiceNotRegisteredError, NoSuitableConstructorError)


class Resolver:
    """Resolves contracts against a registry."""

    def __init__(
        self,
        registry: ServiceRegistry,
        strategy: Optional[ConstructorResolutionStrategy] = None,
        trace_resolutions: bool = False,
    ) -> None:
        self._registry = registry
        self._strategy = strategy or ConstructorResolutionStrategy()
        self._active = threading.local()
        self.trace_resolutions = trace_resolutions

    @property
    def strategy(self) -> ConstructorResolutionStrategy:
        return self._strategy

    @overload
    def resolve(self, contract: Type[T]) -> T: ...

    @overload
    def resolve(self, contract: Hashable) -> Any: ...

    def resolve(self, contract: Any) -> Any:
        """Resolve a service instance for ``contract``.

        Raises:
            ServiceNotRegisteredError: no registration for the contract or a
                required dependency
            NoSuitableConstructorError: an implementation has no usable
                construction signature
            CircularDependencyError: the dependency graph loops back
            InstanceCreationError: a constructor or factory raised
        """
        chain: Chain = getattr(self._active, "chain", ())
        if not self.trace_resolutions:
            return self._resolve(contract, chain)

        with create_span(
            "vessel.resolve",
            {"vessel.contract": contract_name(contract)},
        ) as span:
            instance = self._resolve(contract, chain)
            span.set_attribute("vessel.implementation", contract_name(type(instance)))
            return instance

    def plan_for(self, descriptor: ServiceDescriptor) -> ConstructionPlan:
        """Construction plan for a type or factory descriptor."""
        if descriptor.factory is not None:
            return self._strategy.plan_for_factory(descriptor.factory)
        return self._strategy.select_construction_plan(descriptor.implementation_type)

    def _resolve(self, contract: Hashable, chain: Chain) -> Any:
        if contract in chain:
            raise CircularDependencyError(chain + (contract,))

        descriptor = self._registry.lookup(contract)
        if descriptor is None:
            raise ServiceNotRegisteredError(
                contract,
                requested_by=chain[-1] if chain else None,
            )

        if descriptor.has_instance:
            return descriptor.instance

        chain = chain + (contract,)

        if not descriptor.is_singleton:
            return self._construct(descriptor, chain)

        guard = descriptor.guard
        if guard.is_populated:
            return guard.value

        # Refuse cyclic graphs before taking any lock
        self.ensure_acyclic(contract, chain)
        return guard.get_or_create(lambda: self._construct_singleton(descriptor, chain))

    def _construct_singleton(self, descriptor: ServiceDescriptor, chain: Chain) -> Any:
        logger.debug("Creating singleton service", contract=contract_name(descriptor.contract))
        instance = self._construct(descriptor, chain)
        logger.debug(
            "Singleton service created and cached",
            contract=contract_name(descriptor.contract),
        )
        return instance

    def _construct(self, descriptor: ServiceDescriptor, chain: Chain) -> Any:
        plan = self.plan_for(descriptor)

        values: Dict[str, Any] = {}
        for param in plan.parameters:
            if param.contract is None:
                continue
            if not param.optional:
                values[param.name] = self._resolve(param.contract, chain)
                continue
            try:
                values[param.name] = self._resolve(param.contract, chain)
            except _DEFAULT_ON as e:
                logger.debug(
                    "Optional dependency unavailable, using default",
                    contract=contract_name(descriptor.contract),
                    parameter=param.name,
                    error_code=e.error_code,
                )

        outer = getattr(self._active, "chain", ())
        self._active.chain = chain
        try:
            return plan.invoke(values)
        except VesselError:
            # A factory resolving from the container itself already failed
            # with the precise cause.
            raise
        except Exception as e:
            logger.warning(
                "Service construction failed",
                contract=contract_name(descriptor.contract),
                plan=describe_plan(plan),
                error=repr(e),
            )
            context = ErrorContext.from_current_span(
                operation="resolve",
                component=__name__,
                metadata={"chain": [contract_name(c) for c in chain]},
            )
            raise InstanceCreationError(descriptor.contract, e, context=context) from e
        finally:
            self._active.chain = outer

    def ensure_acyclic(self, contract: Hashable, chain: Chain = ()) -> None:
        """Walk the static dependency graph below ``contract``.

        ``chain`` must already end with ``contract``. Only registered
        dependencies are followed; pre-built instances and constructed
        singletons end the walk since resolving them takes no lock.
        """
        if not chain:
            chain = (contract,)
        self._walk(contract, chain, set())

    def _walk(self, contract: Hashable, path: Chain, done: Set[Hashable]) -> None:
        descriptor = self._registry.lookup(contract)
        if descriptor is None or descriptor.has_instance:
            return
        if descriptor.is_singleton and descriptor.guard.is_populated:
            return

        try:
            plan = self.plan_for(descriptor)
        except NoSuitableConstructorError:
            # Reported when resolution reaches it, unless a default covers it
            return

        for dependency in plan.dependencies:
            if dependency in path:
                raise CircularDependencyError(path + (dependency,))
            if dependency in done:
                continue
            self._walk(dependency, path + (dependency,), done)
            done.add(dependency)
