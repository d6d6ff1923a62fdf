"""Unit tests configuration file."""

import os

import pytest

from wlscanner.generator import parse

EXAMPLE_XML = os.path.join(os.path.dirname(os.path.realpath(__file__)), "generator", "example.xml")


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def protocol():
    """The example protocol, freshly parsed for every test."""
    with open(EXAMPLE_XML, "rb") as f:
        return parse(f.read(), filename="example.xml")
