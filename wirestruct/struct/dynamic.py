"""Schema-driven access to packed structures of types unknown until runtime."""

import struct as _struct
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from ..descriptor import StructDescriptor
from ..errors import SerializationError, SizeMismatchError
from ..registry import StructRegistry
from ..schema.resolver import resolve_descriptor
from ..schema.types import FORMAT_CHARS, FieldEntry, PrimitiveKind

_BYTE_ORDERS = {"little": "<", "big": ">"}
_TEXT_ENCODING = "latin-1"


class DynamicView:
    """A packed structure buffer together with its resolved field map.

    The schema is resolved once, when the view is created. The buffer always
    holds exactly one structure; replacing it swaps the whole record at once,
    so readers see either the previous or the new snapshot.

    Example:
        view = DynamicView(REGISTRY.lookup("Pose"), payload)
        for path, entry in view.fields.items():
            print(path, entry.offset, view.get(path))
    """

    def __init__(
        self,
        descriptor: StructDescriptor,
        buffer: bytes | bytearray | memoryview,
        *,
        byteorder: str = "little",
        registry: StructRegistry | None = None,
    ) -> None:
        if len(buffer) != descriptor.size:
            raise SizeMismatchError(
                f"Buffer size ({len(buffer)}) does not match "
                f"{descriptor.type_name} size ({descriptor.size})"
            )

        if byteorder not in _BYTE_ORDERS:
            raise ValueError(f"Unknown byte order {byteorder}")

        entries = resolve_descriptor(descriptor, registry)

        self._descriptor = descriptor
        self._byteorder = _BYTE_ORDERS[byteorder]
        self._fields = MappingProxyType({entry.path: entry for entry in entries})
        self._buffer = bytes(buffer)

    @property
    def descriptor(self) -> StructDescriptor:
        return self._descriptor

    @property
    def fields(self) -> Mapping[str, FieldEntry]:
        """Resolved fields by dotted path, in declaration order."""
        return self._fields

    @property
    def buffer(self) -> bytes:
        return self._buffer

    def field(self, path: str) -> FieldEntry:
        """Get the resolved field at a dotted path."""
        try:
            return self._fields[path]
        except KeyError:
            raise KeyError(f"{self._descriptor.type_name} has no field {path!r}") from None

    def replace_buffer(self, buffer: bytes | bytearray | memoryview) -> None:
        """Replace the whole record with a new snapshot of the same size."""
        if len(buffer) != len(self._buffer):
            raise SizeMismatchError(
                f"Buffer size ({len(buffer)}) does not match current size ({len(self._buffer)})"
            )
        self._buffer = bytes(buffer)

    def get(self, path: str) -> Any:
        """Decode the value of one field.

        char fields decode as Latin-1 text up to the first null byte, so any
        byte value reads back as one character. Arrays of any other kind
        decode as lists.
        """
        entry = self.field(path)
        kind = entry.type.kind
        count = entry.type.count

        if kind == PrimitiveKind.CHAR:
            raw = self._buffer[entry.offset : entry.end]
            null = raw.find(b"\x00")
            return raw[: null if null >= 0 else count].decode(_TEXT_ENCODING)

        values = _struct.unpack_from(self._format(entry), self._buffer, entry.offset)
        if count == 1:
            return values[0]
        return list(values)

    def set(self, path: str, value: Any) -> None:
        """Encode a new value into one field, replacing the record."""
        entry = self.field(path)
        count = entry.type.count
        buffer = bytearray(self._buffer)

        if entry.type.kind == PrimitiveKind.CHAR:
            try:
                encoded = value.encode(_TEXT_ENCODING)
            except UnicodeEncodeError as e:
                raise SerializationError(f"Cannot encode {value!r} into {path}: {e}") from e
            if len(encoded) > count:
                raise SerializationError(f"{path} exceeds {count} chars")
            values = [encoded]
        elif count == 1:
            values = [value]
        else:
            values = list(value)
            if len(values) != count:
                raise SerializationError(f"{path} must have {count} elements")

        try:
            _struct.pack_into(self._format(entry), buffer, entry.offset, *values)
        except _struct.error as e:
            raise SerializationError(f"Cannot pack {value!r} into {path}: {e}") from e

        self._buffer = bytes(buffer)

    def _format(self, entry: FieldEntry) -> str:
        return f"{self._byteorder}{entry.type.count}{FORMAT_CHARS[entry.type.kind]}"

    def __repr__(self) -> str:
        return f"DynamicView({self._descriptor.type_name}, {self._buffer.hex()})"
