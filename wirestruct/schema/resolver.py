"""Resolution of schema text into flat, offset-addressed field maps."""

import logging

from ..descriptor import StructDescriptor
from ..errors import MalformedSchemaError, SizeMismatchError, UnresolvedStructureError
from ..registry import REGISTRY, StructRegistry
from .parser import parse
from .types import FieldDeclaration, FieldEntry, FieldType, is_primitive, primitive_kind

_logger = logging.getLogger(__name__)


class SchemaResolver:
    """Resolve schemas against a registry of structure descriptors.

    Primitive declarations become one field entry each. A declaration whose
    type names a registered structure is inlined: the structure's own schema
    is resolved at the current offset with every path prefixed by the field
    name, and the cursor then advances by the structure's declared size.
    """

    def __init__(self, registry: StructRegistry | None = None):
        self.registry = registry if registry is not None else REGISTRY

    def resolve_schema(
        self, schema: str, prefix: str = "", offset: int = 0
    ) -> tuple[list[FieldEntry], int]:
        """Resolve schema text starting at a byte offset.

        Returns:
            Tuple of (field entries, cursor after the last field).
        """
        return self._resolve(schema, prefix, offset, ())

    def resolve(self, descriptor: StructDescriptor) -> list[FieldEntry]:
        """Resolve a descriptor's schema and check it against its size."""
        entries, cursor = self._resolve(descriptor.schema(), "", 0, (descriptor.type_name,))

        if cursor != descriptor.size:
            raise SizeMismatchError(
                f"Schema of {descriptor.type_name} describes {cursor} bytes, "
                f"but its size is {descriptor.size}"
            )

        _logger.debug("Resolved %s into %d fields", descriptor.type_name, len(entries))
        return entries

    def _resolve(
        self, schema: str, prefix: str, offset: int, enclosing: tuple[str, ...]
    ) -> tuple[list[FieldEntry], int]:
        entries: list[FieldEntry] = []
        cursor = offset

        for decl in parse(schema):
            if is_primitive(decl.type_name):
                field_type = FieldType(primitive_kind(decl.type_name), decl.element_count)
                entries.append(FieldEntry(f"{prefix}{decl.name}", cursor, field_type, decl.enum))
                cursor += field_type.size
            else:
                cursor = self._resolve_struct(decl, prefix, cursor, enclosing, entries)

        return entries, cursor

    def _resolve_struct(
        self,
        decl: FieldDeclaration,
        prefix: str,
        cursor: int,
        enclosing: tuple[str, ...],
        entries: list[FieldEntry],
    ) -> int:
        descriptor = self.registry.lookup(decl.type_name)
        if descriptor is None:
            raise UnresolvedStructureError(decl.type_name, f"{prefix}{decl.name}")

        if descriptor.type_name in enclosing:
            raise MalformedSchemaError(
                f"Structure {descriptor.type_name} contains itself through field {prefix}{decl.name}"
            )

        schema = descriptor.schema()
        for index in range(decl.element_count):
            if decl.count is None:
                path = f"{prefix}{decl.name}."
            else:
                path = f"{prefix}{decl.name}[{index}]."

            nested, end = self._resolve(schema, path, cursor, (*enclosing, descriptor.type_name))

            # Nested fields may leave padding but never spill into the next field
            if end > cursor + descriptor.size:
                raise SizeMismatchError(
                    f"Schema of {descriptor.type_name} describes {end - cursor} bytes, "
                    f"but its size is {descriptor.size}"
                )

            entries.extend(nested)
            cursor += descriptor.size

        return cursor


def resolve_descriptor(
    descriptor: StructDescriptor, registry: StructRegistry | None = None
) -> list[FieldEntry]:
    """Resolve a structure descriptor into its flat field map."""
    return SchemaResolver(registry).resolve(descriptor)


def resolve_schema(schema: str, registry: StructRegistry | None = None) -> list[FieldEntry]:
    """Resolve standalone schema text into its flat field map."""
    entries, _ = SchemaResolver(registry).resolve_schema(schema)
    return entries


def schema_size(schema: str, registry: StructRegistry | None = None) -> int:
    """Calculate how many bytes a schema's fields occupy."""
    _, cursor = SchemaResolver(registry).resolve_schema(schema)
    return cursor
