"""Process-wide catalog of structure descriptors."""

import logging
import threading
from collections.abc import Iterator
from types import MappingProxyType

from .descriptor import StructDescriptor

_logger = logging.getLogger(__name__)


class StructRegistry:
    """Catalog of structure descriptors keyed by type name.

    Registration is idempotent: the first descriptor registered under a name
    stays live for the lifetime of the registry and later registrations of
    the same name are ignored. Entries are never removed.

    Writers serialize on a lock and publish a fresh read-only mapping on every
    insert, so readers never lock and never see a half-inserted entry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._descriptors: MappingProxyType[str, StructDescriptor] = MappingProxyType({})

    def register(self, descriptor: StructDescriptor) -> StructDescriptor:
        """Add a descriptor unless its type name is already registered.

        Returns:
            The live descriptor for the type name, which is the given
            descriptor only if this call inserted it.
        """
        with self._lock:
            existing = self._descriptors.get(descriptor.type_name)
            if existing is None:
                self._descriptors = MappingProxyType(
                    {**self._descriptors, descriptor.type_name: descriptor}
                )
                _logger.debug(
                    "Registered structure %s (%d bytes)", descriptor.type_name, descriptor.size
                )
                return descriptor

        if existing is not descriptor:
            if existing.size != descriptor.size:
                _logger.warning(
                    "Ignoring registration of %s with size %d, already registered with size %d",
                    descriptor.type_name,
                    descriptor.size,
                    existing.size,
                )
            else:
                _logger.debug("Structure %s already registered", descriptor.type_name)
        return existing

    def contains(self, type_name: str) -> bool:
        """Check if a descriptor is registered under a type name."""
        return type_name in self._descriptors

    def lookup(self, type_name: str) -> StructDescriptor | None:
        """Get the descriptor registered under a type name, if any."""
        return self._descriptors.get(type_name)

    def descriptors(self) -> tuple[StructDescriptor, ...]:
        """Return every registered descriptor, in registration order."""
        return tuple(self._descriptors.values())

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._descriptors

    def __iter__(self) -> Iterator[StructDescriptor]:
        return iter(self.descriptors())

    def __len__(self) -> int:
        return len(self._descriptors)


REGISTRY = StructRegistry()
"""Registry shared by every structure type in the process."""
