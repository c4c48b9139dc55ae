"""Schema text parser using Lark."""

import os
from dataclasses import dataclass
from typing import Any

from lark import Lark
from lark.exceptions import UnexpectedInput
from lark.visitors import Transformer

from ..errors import MalformedSchemaError
from .types import INTEGER_KINDS, FieldDeclaration, is_primitive, primitive_kind

_g_parser: Lark | None = None


@dataclass
class _Array:
    value: int


@dataclass
class _EnumSpec:
    values: dict[str, int]


class TreeTransformer(Transformer):
    """Transform parse tree into field declarations."""

    def start(self, args: list[Any]) -> list[FieldDeclaration]:
        return list(args)

    def array(self, args: list[Any]) -> _Array:
        return _Array(value=int(args[0]))

    def enum_value(self, args: list[Any]) -> tuple[str, int]:
        return (str(args[0]), int(args[1]))

    def enum_spec(self, args: list[Any]) -> _EnumSpec:
        return _EnumSpec(values=dict(args))

    def declaration(self, args: list[Any]) -> FieldDeclaration:
        enum = args.pop(0).values if isinstance(args[0], _EnumSpec) else None
        array = args[2] if len(args) > 2 else None
        return FieldDeclaration(
            type_name=str(args[0]),
            name=str(args[1]),
            count=array.value if array else None,
            enum=enum,
        )


def validate(declarations: list[FieldDeclaration]) -> None:
    """Validate parsed schema declarations."""
    names: set[str] = set()

    for decl in declarations:
        if decl.name in names:
            raise MalformedSchemaError(f"Field {decl.name!r} is declared more than once")
        names.add(decl.name)

        if decl.count is not None and decl.count < 1:
            raise MalformedSchemaError(f"Field {decl.name!r} has array size {decl.count}")

        if decl.enum is not None:
            integral = is_primitive(decl.type_name) and primitive_kind(decl.type_name) in INTEGER_KINDS
            if not integral:
                raise MalformedSchemaError(
                    f"Field {decl.name!r} has an enum but type {decl.type_name!r} is not an integer"
                )


def parse(text: str) -> list[FieldDeclaration]:
    """Parse schema text into its field declarations, in declaration order."""
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/schema.lark", encoding="utf-8") as f:
            grammar = f.read()

        _g_parser = Lark(grammar, parser="lalr")

    try:
        tree = _g_parser.parse(text)
    except UnexpectedInput as e:
        raise MalformedSchemaError(f"Malformed schema {text!r}: {e}") from e

    declarations = TreeTransformer().transform(tree)
    validate(declarations)

    return declarations
