"""
Vessel - Service Lifetimes

Lifetime options and the per-descriptor guard that builds a shared
instance at most once.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


class ServiceLifetime(Enum):
    """Service lifetime options."""

    SINGLETON = "singleton"  # One instance per descriptor
    TRANSIENT = "transient"  # New instance every time


class _Empty:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<empty>"


EMPTY: Any = _Empty()


class LifetimeGuard(Generic[T]):
    """
    Cached-instance slot plus the lock used to fill it.

    The slot moves from empty to populated exactly once. Readers that find
    it populated never touch the lock; the first writer builds under the
    lock and later arrivals block until it finishes, then re-check.

    Usage:
        guard = LifetimeGuard()
        instance = guard.get_or_create(lambda: Database(settings))
    """

    __slots__ = ("_value", "_lock")

    def __init__(self) -> None:
        self._value: Any = EMPTY
        self._lock = threading.Lock()

    @property
    def is_populated(self) -> bool:
        return self._value is not EMPTY

    @property
    def value(self) -> T:
        if self._value is EMPTY:
            raise LookupError("LifetimeGuard has not been populated")
        return self._value

    def get_or_create(self, build: Callable[[], T]) -> T:
        """Return the cached value, building it under the lock on first use.

        If ``build`` raises, the slot stays empty and the next caller
        retries the construction.
        """
        value = self._value
        if value is not EMPTY:
            return value

        with self._lock:
            # Another thread may have finished while we waited
            if self._value is EMPTY:
                self._value = build()
            return self._value

    def __repr__(self) -> str:
        state = "populated" if self.is_populated else "empty"
        return f"LifetimeGuard({state})"
