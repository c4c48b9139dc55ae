"""Exceptions raised by structure registration, resolution and codecs."""


class StructureError(RuntimeError):
    """Base exception for structure errors."""


class SchemaError(StructureError):
    """Base exception for schema resolution errors."""


class MalformedSchemaError(SchemaError):
    """Raised when schema text does not follow the schema grammar."""


class UnresolvedStructureError(SchemaError):
    """Raised when a schema names a structure type that is not registered."""

    def __init__(self, type_name: str, field: str) -> None:
        super().__init__(f"Field {field!r} references unknown structure type {type_name!r}")
        self.type_name = type_name
        self.field = field


class SizeMismatchError(StructureError):
    """Raised when a byte length disagrees with a structure's declared size."""


class TruncatedInputError(StructureError):
    """Raised when fewer bytes remain than a structure needs to unpack."""


class SerializationError(StructureError):
    """Raised when a codec writes a different number of bytes than its size."""
