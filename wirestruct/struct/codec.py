"""Codec contract for fixed-size binary structure types."""

from typing import Any, ClassVar, Self

from ..descriptor import StructDescriptor
from ..errors import SerializationError, TruncatedInputError
from ..registry import REGISTRY, StructRegistry
from ..schema.resolver import resolve_descriptor


class Structure:
    """Base class for structure types with a fixed binary layout.

    Subclasses declare their type name, packed size and schema, and implement
    the ``_pack_into`` and ``_unpack_from`` hooks. Declaring ``TYPE`` in the
    class body registers the structure when the class is defined; pass
    ``register=False`` in the class statement to register it later with
    register_structure().

    Example:
        @dataclass
        class Point(Structure):
            TYPE: ClassVar[str] = "Point"
            SIZE: ClassVar[int] = 8
            SCHEMA: ClassVar[str] = "int32 x;int32 y;"

            x: int
            y: int

            def _pack_into(self, buffer: bytearray) -> None:
                buffer.extend(_struct.pack("<ii", self.x, self.y))

            @classmethod
            def _unpack_from(cls, data: bytes | memoryview, offset: int) -> Self:
                return cls(*_struct.unpack_from("<ii", data, offset))
    """

    TYPE: ClassVar[str]
    SIZE: ClassVar[int]
    SCHEMA: ClassVar[str] = ""
    DESCRIPTION: ClassVar[StructDescriptor]

    def __init_subclass__(cls, register: bool = True, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if register and "TYPE" in cls.__dict__:
            register_structure(cls)

    @classmethod
    def schema(cls) -> str:
        """Return the schema text. Override to compose schemas at runtime."""
        return cls.SCHEMA

    @classmethod
    def format_field(cls, name: str) -> str:
        """Format a declaration of a field of this type, for enclosing schemas."""
        return f"{cls.TYPE} {name}"

    def pack_into(self, buffer: bytearray) -> None:
        """Append exactly SIZE bytes encoding this structure to buffer."""
        start = len(buffer)
        self._pack_into(buffer)

        written = len(buffer) - start
        if written != self.SIZE:
            del buffer[start:]
            raise SerializationError(f"{self.TYPE} packed {written} bytes, expected {self.SIZE}")

    def pack(self) -> bytes:
        """Pack this structure to bytes."""
        buffer = bytearray()
        self.pack_into(buffer)
        return bytes(buffer)

    @classmethod
    def unpack(cls, data: bytes | bytearray | memoryview, offset: int = 0) -> tuple[Self, int]:
        """Unpack a structure from bytes.

        At least SIZE bytes must remain after offset; this is checked and
        reported with TruncatedInputError rather than left to the hook.

        Args:
            data: The bytes to unpack from.
            offset: Starting offset in data.

        Returns:
            Tuple of (instance, bytes_consumed).
        """
        if offset < 0 or len(data) - offset < cls.SIZE:
            raise TruncatedInputError(
                f"{cls.TYPE} needs {cls.SIZE} bytes at offset {offset}, "
                f"but only {max(len(data) - offset, 0)} remain"
            )

        return cls._unpack_from(data, offset), cls.SIZE

    def _pack_into(self, buffer: bytearray) -> None:
        raise NotImplementedError("_pack_into() must be implemented by the structure type")

    @classmethod
    def _unpack_from(cls, data: bytes | bytearray | memoryview, offset: int) -> Self:
        raise NotImplementedError("_unpack_from() must be implemented by the structure type")


def describe(structure_type: type[Structure]) -> StructDescriptor:
    """Assemble a descriptor from a structure type's schema, name and size."""
    return StructDescriptor(
        schema_provider=structure_type.schema,
        type_name=structure_type.TYPE,
        size=structure_type.SIZE,
    )


def register_structure(
    structure_type: type[Structure], registry: StructRegistry | None = None
) -> StructDescriptor:
    """Register a structure type, validating its schema against its size.

    The schema is resolved before the descriptor is published, so a schema
    naming unregistered structures or describing a different number of bytes
    than SIZE fails here instead of at first use. A type name that is already
    registered keeps its first descriptor; the registry logs the duplicate,
    with a warning when the sizes disagree.

    Returns:
        The live descriptor for the structure's type name.
    """
    if registry is None:
        registry = REGISTRY

    descriptor = describe(structure_type)
    if not registry.contains(descriptor.type_name):
        resolve_descriptor(descriptor, registry)
    live = registry.register(descriptor)

    structure_type.DESCRIPTION = live
    return live
