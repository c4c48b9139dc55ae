"""Unit tests configuration file."""

import pytest

from wirestruct.descriptor import StructDescriptor
from wirestruct.registry import StructRegistry


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def registry():
    """A private registry holding only a Point3 descriptor."""
    registry = StructRegistry()
    registry.register(StructDescriptor(lambda: "float32 x;float32 y;float32 z;", "Point3", 12))
    return registry
