"""
Pytest configuration and shared fixtures for Codesurgeon tests.
"""

import json

import pytest

from codesurgeon import Codesurgeon
from codesurgeon.extraction import CodeGenerator, TopLevelMatcher
from codesurgeon.parsing import AnnotatedTreeBuilder


@pytest.fixture(scope="session")
def builder():
    """One tree-sitter parser for the whole run."""
    return AnnotatedTreeBuilder()


@pytest.fixture
def generator():
    return CodeGenerator(indent_width=4)


@pytest.fixture
def matcher(generator):
    return TopLevelMatcher(generator)


@pytest.fixture
def surgeon():
    """A quiet session with default configuration."""
    return Codesurgeon(quiet=True)


@pytest.fixture
def write_js(tmp_path):
    """Write a JavaScript file under tmp_path and return its path as str."""

    def _write(name: str, text: str) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def package_json(tmp_path):
    """Write a package.json and return its path."""

    def _write(**data) -> str:
        data.setdefault("version", "1.2.3")
        path = tmp_path / "package.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write

