"""Schema language parsing and field resolution."""

from .parser import parse as parse
from .resolver import SchemaResolver as SchemaResolver
from .resolver import resolve_descriptor as resolve_descriptor
from .resolver import resolve_schema as resolve_schema
from .resolver import schema_size as schema_size
from .types import *
