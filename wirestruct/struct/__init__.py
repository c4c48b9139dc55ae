"""Runtime support for fixed-size binary structures."""

from .batch import StructureBatch as StructureBatch
from .codec import Structure as Structure
from .codec import describe as describe
from .codec import register_structure as register_structure
from .dynamic import DynamicView as DynamicView
