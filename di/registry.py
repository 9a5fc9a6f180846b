"""
Vessel - Service Registry

Thread-safe mapping from contract to its current descriptor.
"""

from __future__ import annotations

import threading
from typing import Dict, Hashable, List, Optional

from core.errors import DuplicateRegistrationError, RegistrationError, contract_name
from di.descriptor import ServiceDescriptor
from observability.logging import get_logger

logger = get_logger(__name__)


class ServiceRegistry:
    """
    Contract -> descriptor map.

    Writes happen during configuration; lookups happen concurrently during
    resolution. The internal lock only covers the map itself and is never
    held while a service is being constructed.
    """

    def __init__(self, allow_overrides: bool = True) -> None:
        self._descriptors: Dict[Hashable, ServiceDescriptor] = {}
        self._lock = threading.RLock()
        self.allow_overrides = allow_overrides

    def register(self, contract: Hashable, descriptor: ServiceDescriptor) -> None:
        """Insert or replace the descriptor for ``contract``."""
        if descriptor.contract != contract:
            raise RegistrationError(
                f"Descriptor for '{contract_name(descriptor.contract)}' "
                f"registered under '{contract_name(contract)}'",
                contract=contract,
            )

        with self._lock:
            replaced = self._descriptors.get(contract)
            if replaced is not None and not self.allow_overrides:
                raise DuplicateRegistrationError(contract)
            self._descriptors[contract] = descriptor

        if replaced is not None:
            logger.debug(
                "Replaced service registration",
                contract=contract_name(contract),
                previous=replaced.describe(),
                current=descriptor.describe(),
            )
        else:
            logger.debug(
                "Registered service",
                contract=contract_name(contract),
                lifetime=descriptor.lifetime.value,
            )

    def lookup(self, contract: Hashable) -> Optional[ServiceDescriptor]:
        with self._lock:
            return self._descriptors.get(contract)

    def contains(self, contract: Hashable) -> bool:
        with self._lock:
            return contract in self._descriptors

    def contracts(self) -> List[Hashable]:
        """Registered contracts in first-registration order."""
        with self._lock:
            return list(self._descriptors)

    def snapshot(self) -> Dict[Hashable, ServiceDescriptor]:
        with self._lock:
            return dict(self._descriptors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._descriptors)

    def __contains__(self, contract: Hashable) -> bool:
        return self.contains(contract)
