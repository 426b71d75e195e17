"""Codesurgeon command-line interface."""

from codesurgeon.cli.main import cli, main

__all__ = ["cli", "main"]
