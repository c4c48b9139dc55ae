"""Command-line interface for inspecting structure layouts."""

from __future__ import annotations

import importlib
import json
import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.table import Table

from wirestruct.descriptor import StructDescriptor
from wirestruct.errors import StructureError
from wirestruct.registry import REGISTRY
from wirestruct.schema.resolver import SchemaResolver, resolve_descriptor

if TYPE_CHECKING:
    from wirestruct.schema.types import FieldEntry

module_option = click.option(
    "--module",
    "-m",
    "modules",
    multiple=True,
    help="Module to import so its structures are registered (repeatable)",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Inspect fixed-size binary structure layouts."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@cli.command()
@module_option
def types(modules: tuple[str, ...]) -> None:
    """List registered structure types."""
    _import_modules(modules)

    console = Console()
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Name", style="white")
    table.add_column("Size", style="yellow", justify="right")

    for descriptor in REGISTRY.descriptors():
        table.add_row(descriptor.type_name, f"{descriptor.size} bytes")

    console.print(table)


@cli.command()
@click.argument("type_name")
@module_option
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def layout(type_name: str, modules: tuple[str, ...], output_json: bool) -> None:
    """Display the resolved field layout of a registered structure."""
    _import_modules(modules)

    descriptor = REGISTRY.lookup(type_name)
    if descriptor is None:
        print(f"Unknown structure type: {type_name}")
        sys.exit(1)

    try:
        entries = resolve_descriptor(descriptor)
    except StructureError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if output_json:
        _output_json(entries, descriptor.size, descriptor)
    else:
        _output_plain(entries, descriptor.size, descriptor)


@cli.command()
@click.argument("schema")
@module_option
@click.option("--size", type=int, default=None, help="Declared size to check the schema against")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def resolve(schema: str, modules: tuple[str, ...], size: int | None, output_json: bool) -> None:
    """Resolve schema text against the registered structures."""
    _import_modules(modules)

    try:
        if size is None:
            entries, total = SchemaResolver().resolve_schema(schema)
        else:
            entries = resolve_descriptor(StructDescriptor(lambda: schema, "<schema>", size))
            total = size
    except StructureError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if output_json:
        _output_json(entries, total, None)
    else:
        _output_plain(entries, total, None)


def _import_modules(modules: tuple[str, ...]) -> None:
    for name in modules:
        try:
            importlib.import_module(name)
        except ImportError as e:
            print(f"Cannot import {name}: {e}")
            sys.exit(1)


def _output_json(
    entries: list[FieldEntry],
    size: int,
    descriptor: StructDescriptor | None,
) -> None:
    """Output a field layout as JSON."""
    data: dict = {
        "type": descriptor.type_name if descriptor else None,
        "size": size,
        "fields": [entry.to_dict() for entry in entries],
    }

    print(json.dumps(data, indent=2))


def _output_plain(
    entries: list[FieldEntry],
    size: int,
    descriptor: StructDescriptor | None,
) -> None:
    """Output a field layout using rich text formatting."""
    console = Console()

    if descriptor:
        console.print(f"[bold cyan]{descriptor.type_name}[/bold cyan] ({size} bytes)")
    else:
        console.print(f"[bold cyan]Schema[/bold cyan] ({size} bytes)")

    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Field", style="white")
    table.add_column("Offset", style="yellow", justify="right")
    table.add_column("Type", style="green")
    table.add_column("Size", style="dim", justify="right")

    for entry in entries:
        field_type = str(entry.type)
        if entry.enum:
            field_type += " {" + ", ".join(f"{k}={v}" for k, v in entry.enum.items()) + "}"
        table.add_row(entry.path, str(entry.offset), field_type, str(entry.size))

    console.print(table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
