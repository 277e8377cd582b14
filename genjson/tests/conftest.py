"""Unit tests configuration file."""

import os
from types import SimpleNamespace

import pytest

from genjson.generator import GeneratorConfig, generate

FIXTURE_SRC = os.path.join(os.path.dirname(os.path.realpath(__file__)), "fixtures", "src")


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


def load_generated(source, name):
    """Execute generated module source and return its namespace."""
    namespace = {"__name__": name}
    exec(compile(source, f"<{name}>", "exec"), namespace)
    return namespace


@pytest.fixture
def storefront_config():
    return GeneratorConfig(
        root=FIXTURE_SRC,
        base_package="storefront.models",
        dest_package="storefront.json",
    )


@pytest.fixture
def storefront(monkeypatch, storefront_config):
    """Generated readers and writers for the storefront sample models."""
    monkeypatch.syspath_prepend(FIXTURE_SRC)
    result = generate(storefront_config)
    return SimpleNamespace(
        result=result,
        readers=load_generated(result.files["readers.py"], "storefront.json.readers"),
        writers=load_generated(result.files["writers.py"], "storefront.json.writers"),
    )


@pytest.fixture
def load_module():
    return load_generated
