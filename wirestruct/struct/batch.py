"""Homogeneous arrays of packed structures."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TypeVar

from ..descriptor import StructDescriptor
from ..errors import SizeMismatchError, StructureError
from .codec import Structure

TStructure = TypeVar("TStructure", bound=Structure)


@dataclass(frozen=True)
class StructureBatch:
    """Any number of structures of one type packed back to back.

    The descriptor is held by reference and the data is immutable. Packing
    and unpacking individual elements is left to the structure's codec.
    """

    descriptor: StructDescriptor
    count: int
    data: bytes

    def __post_init__(self) -> None:
        if self.count < 0:
            raise SizeMismatchError(f"Batch count must not be negative, got {self.count}")

        expected = self.descriptor.size * self.count
        if len(self.data) != expected:
            raise SizeMismatchError(
                f"{self.count} x {self.descriptor.type_name} needs {expected} bytes, "
                f"got {len(self.data)}"
            )

        # bytearray and memoryview inputs are copied so the batch stays read-only
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def from_parts(
        cls, descriptor: StructDescriptor, count: int, data: bytes | bytearray | memoryview
    ) -> "StructureBatch":
        """Create a batch from a descriptor, element count and packed data."""
        return cls(descriptor, count, bytes(data))

    @classmethod
    def from_structures(
        cls, structure_type: type[TStructure], values: Iterable[TStructure]
    ) -> "StructureBatch":
        """Pack structures back to back into a batch."""
        buffer = bytearray()
        count = 0
        for value in values:
            value.pack_into(buffer)
            count += 1
        return cls(structure_type.DESCRIPTION, count, bytes(buffer))

    def element(self, index: int) -> bytes:
        """Return the packed bytes of one element."""
        if not -self.count <= index < self.count:
            raise IndexError(f"Batch index {index} out of range for {self.count} elements")
        if index < 0:
            index += self.count

        size = self.descriptor.size
        return self.data[index * size : (index + 1) * size]

    def unpack(self, structure_type: type[TStructure]) -> list[TStructure]:
        """Unpack every element with a structure type matching the descriptor."""
        if structure_type.TYPE != self.descriptor.type_name:
            raise StructureError(
                f"Cannot unpack {self.descriptor.type_name} batch as {structure_type.TYPE}"
            )

        values: list[TStructure] = []
        offset = 0
        for _ in range(self.count):
            value, consumed = structure_type.unpack(self.data, offset)
            values.append(value)
            offset += consumed
        return values

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[bytes]:
        for index in range(self.count):
            yield self.element(index)
