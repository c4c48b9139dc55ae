"""Runtime descriptors for fixed-size binary structures.

A descriptor is the registry's view of a structure type: its name, its
packed size, and a deferred supplier of its schema text.
"""

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StructDescriptor:
    """Describes one structure type and its fixed binary layout."""

    # Deferred: a schema may name structures registered after this one
    schema_provider: Callable[[], str]
    type_name: str
    size: int

    def schema(self) -> str:
        """Return the schema text describing this structure's fields."""
        return self.schema_provider()

    def __repr__(self) -> str:
        return f"StructDescriptor(type_name={self.type_name!r}, size={self.size})"
