"""wirestruct - Fixed-size binary structure descriptors and codecs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wirestruct")
except PackageNotFoundError:
    __version__ = "(local)"
