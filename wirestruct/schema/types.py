"""Type definitions for schema parsing and field resolution."""

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from dataclasses_json import DataClassJsonMixin


class PrimitiveKind(StrEnum):
    """Primitive field kinds of the schema language."""

    BOOL = "bool"
    CHAR = "char"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"


# Primitive type sizes in bytes
PRIMITIVE_SIZES: dict[PrimitiveKind, int] = {
    PrimitiveKind.BOOL: 1,
    PrimitiveKind.CHAR: 1,
    PrimitiveKind.INT8: 1,
    PrimitiveKind.UINT8: 1,
    PrimitiveKind.INT16: 2,
    PrimitiveKind.UINT16: 2,
    PrimitiveKind.INT32: 4,
    PrimitiveKind.UINT32: 4,
    PrimitiveKind.INT64: 8,
    PrimitiveKind.UINT64: 8,
    PrimitiveKind.FLOAT32: 4,
    PrimitiveKind.FLOAT64: 8,
}

# Map primitive kinds to struct format characters
FORMAT_CHARS: dict[PrimitiveKind, str] = {
    PrimitiveKind.BOOL: "?",
    PrimitiveKind.CHAR: "s",
    PrimitiveKind.INT8: "b",
    PrimitiveKind.UINT8: "B",
    PrimitiveKind.INT16: "h",
    PrimitiveKind.UINT16: "H",
    PrimitiveKind.INT32: "i",
    PrimitiveKind.UINT32: "I",
    PrimitiveKind.INT64: "q",
    PrimitiveKind.UINT64: "Q",
    PrimitiveKind.FLOAT32: "f",
    PrimitiveKind.FLOAT64: "d",
}

TYPE_ALIASES: dict[str, PrimitiveKind] = {
    "float": PrimitiveKind.FLOAT32,
    "double": PrimitiveKind.FLOAT64,
}

INTEGER_KINDS = frozenset(
    [
        PrimitiveKind.INT8,
        PrimitiveKind.INT16,
        PrimitiveKind.INT32,
        PrimitiveKind.INT64,
        PrimitiveKind.UINT8,
        PrimitiveKind.UINT16,
        PrimitiveKind.UINT32,
        PrimitiveKind.UINT64,
    ]
)

PRIMITIVE_TYPES = frozenset([kind.value for kind in PrimitiveKind] + list(TYPE_ALIASES))


def primitive_types() -> list[str]:
    """Return a list of primitive type keywords, aliases included."""
    return sorted(PRIMITIVE_TYPES)


def is_primitive(type_name: str) -> bool:
    """Check if a type keyword names a primitive type."""
    return type_name in PRIMITIVE_TYPES


def primitive_kind(type_name: str) -> PrimitiveKind:
    """Get the canonical kind for a primitive type keyword."""
    if type_name in TYPE_ALIASES:
        return TYPE_ALIASES[type_name]
    return PrimitiveKind(type_name)


@dataclass(frozen=True)
class FieldType(DataClassJsonMixin):
    """A primitive kind and how many elements of it a field holds."""

    kind: PrimitiveKind
    count: int = 1

    @property
    def base_size(self) -> int:
        return PRIMITIVE_SIZES[self.kind]

    @property
    def size(self) -> int:
        return self.base_size * self.count

    def __str__(self) -> str:
        if self.count == 1:
            return self.kind.value
        return f"{self.kind.value}[{self.count}]"


@dataclass
class FieldDeclaration(DataClassJsonMixin):
    """A single declaration parsed from schema text.

    For arrays:
    - count=N: fixed array of N elements
    - count=None: not an array
    """

    type_name: str
    name: str
    count: int | None = None
    enum: dict[str, int] | None = None

    @property
    def element_count(self) -> int:
        return 1 if self.count is None else self.count


@dataclass(frozen=True)
class FieldEntry(DataClassJsonMixin):
    """A resolved primitive field at a byte offset from the structure start.

    Entries are immutable and the enum values are held as a read-only
    mapping, so a resolved layout can be shared without copying.
    """

    path: str
    offset: int
    type: FieldType
    enum: dict[str, int] | None = None

    def __post_init__(self) -> None:
        if self.enum is not None:
            object.__setattr__(self, "enum", MappingProxyType(dict(self.enum)))

    @property
    def size(self) -> int:
        return self.type.size

    @property
    def end(self) -> int:
        return self.offset + self.type.size
