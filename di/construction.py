"""
Vessel - Constructor Resolution Strategy

Works out which contracts must be resolved to build a concrete type or to
call a factory.

A class may declare several construction signatures with
``typing.overload`` on ``__init__``; the overload with the most injectable
parameters wins, ties going to the one declared first. Without overloads
``__init__`` itself is the only candidate.
"""

from __future__ import annotations

import inspect
import threading
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple, Union, get_args, get_origin

from core.errors import NoSuitableConstructorError, contract_name

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class PlanParameter:
    """One injectable parameter of a construction signature."""

    name: str
    contract: Optional[Hashable]
    kind: inspect._ParameterKind
    default: Any = inspect.Parameter.empty

    @property
    def optional(self) -> bool:
        return self.default is not inspect.Parameter.empty

    @property
    def positional_only(self) -> bool:
        return self.kind is inspect.Parameter.POSITIONAL_ONLY


@dataclass(frozen=True)
class ConstructionPlan:
    """Ordered parameters needed to invoke a type or factory."""

    target: Any
    parameters: Tuple[PlanParameter, ...] = field(default_factory=tuple)

    @property
    def dependencies(self) -> Tuple[Hashable, ...]:
        """Contracts of all annotated parameters, in declaration order."""
        return tuple(p.contract for p in self.parameters if p.contract is not None)

    def invoke(self, values: Dict[str, Any]) -> Any:
        """Call the target with resolved values keyed by parameter name.

        Parameters missing from ``values`` fall back to their defaults.
        Positional-only defaults are passed explicitly so later positional
        values keep their slots.
        """
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for param in self.parameters:
            if param.positional_only:
                args.append(values.get(param.name, param.default))
            elif param.name in values:
                kwargs[param.name] = values[param.name]
        return self.target(*args, **kwargs)


def unwrap_optional(annotation: Any) -> Any:
    """``Optional[X]`` and ``X | None`` both become ``X``."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


class ConstructorResolutionStrategy:
    """
    Selects construction plans by signature introspection.

    Plans are cached per target; a type's signatures do not change once it
    is defined.
    """

    def __init__(self) -> None:
        self._plans: Dict[Any, ConstructionPlan] = {}
        self._lock = threading.Lock()

    def select_construction_plan(self, concrete_type: type) -> ConstructionPlan:
        """Pick the richest usable construction signature of ``concrete_type``."""
        cached = self._plans.get(concrete_type)
        if cached is not None:
            return cached

        plan = self._plan_for_type(concrete_type)
        with self._lock:
            return self._plans.setdefault(concrete_type, plan)

    def plan_for_factory(self, factory: Callable[..., Any]) -> ConstructionPlan:
        """Build a plan from a factory callable's own signature."""
        cached = self._plans.get(factory)
        if cached is not None:
            return cached

        try:
            signature = inspect.signature(factory)
        except (TypeError, ValueError) as e:
            raise NoSuitableConstructorError(factory, "signature cannot be inspected", cause=e) from e

        hints = self._type_hints(factory, factory)
        plan = ConstructionPlan(
            target=factory,
            parameters=self._parameters(factory, list(signature.parameters.values()), hints),
        )
        with self._lock:
            return self._plans.setdefault(factory, plan)

    def _plan_for_type(self, concrete_type: type) -> ConstructionPlan:
        if not inspect.isclass(concrete_type):
            raise NoSuitableConstructorError(concrete_type, "not a class")
        if getattr(concrete_type, "_is_protocol", False):
            raise NoSuitableConstructorError(concrete_type, "protocols cannot be instantiated")
        if inspect.isabstract(concrete_type):
            raise NoSuitableConstructorError(concrete_type, "class is abstract")

        init = concrete_type.__init__
        if init is object.__init__:
            return ConstructionPlan(target=concrete_type)

        candidates = list(typing.get_overloads(init)) or [init]

        best: Optional[Tuple[PlanParameter, ...]] = None
        failure: Optional[NoSuitableConstructorError] = None
        for candidate in candidates:
            try:
                signature = inspect.signature(candidate)
            except (TypeError, ValueError) as e:
                failure = NoSuitableConstructorError(
                    concrete_type, "signature cannot be inspected", cause=e
                )
                continue

            # Drop self
            params = list(signature.parameters.values())[1:]
            try:
                hints = self._type_hints(concrete_type, candidate)
                parameters = self._parameters(concrete_type, params, hints)
            except NoSuitableConstructorError as e:
                failure = e
                continue

            if best is None or len(parameters) > len(best):
                best = parameters

        if best is None:
            if failure is None:
                raise NoSuitableConstructorError(concrete_type, "no construction signature")
            raise failure

        return ConstructionPlan(target=concrete_type, parameters=best)

    @staticmethod
    def _type_hints(owner: Any, function: Callable[..., Any]) -> Dict[str, Any]:
        try:
            hints = typing.get_type_hints(function)
        except NameError as e:
            raise NoSuitableConstructorError(
                owner, f"unresolvable annotation ({e})", cause=e
            ) from e
        except TypeError:
            # Callable objects without __annotations__ (e.g. builtins)
            hints = {}
        hints.pop("return", None)
        return hints

    @staticmethod
    def _parameters(
        owner: Any,
        params: List[inspect.Parameter],
        hints: Dict[str, Any],
    ) -> Tuple[PlanParameter, ...]:
        planned: List[PlanParameter] = []
        for param in params:
            if param.kind in _SKIPPED_KINDS:
                continue

            annotation = hints.get(param.name)
            contract = unwrap_optional(annotation) if annotation is not None else None

            if contract is None and param.default is inspect.Parameter.empty:
                raise NoSuitableConstructorError(
                    owner,
                    f"parameter '{param.name}' has no type annotation",
                )

            planned.append(PlanParameter(
                name=param.name,
                contract=contract,
                kind=param.kind,
                default=param.default,
            ))
        return tuple(planned)

    def __repr__(self) -> str:
        return f"ConstructorResolutionStrategy(cached={len(self._plans)})"


def describe_plan(plan: ConstructionPlan) -> str:
    parts = []
    for param in plan.parameters:
        rendered = f"{param.name}: {contract_name(param.contract)}"
        if param.optional:
            rendered += " = <default>"
        parts.append(rendered)
    return f"{contract_name(plan.target)}({', '.join(parts)})"
