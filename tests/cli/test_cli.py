"""
CLI Tests

Tests for the CLI commands including:
- Main CLI group
- Extract command
- Entities command
- Lint command
- Probe command
"""

import sys

import pytest
from click.testing import CliRunner
from loguru import logger

from codesurgeon.cli.main import cli, parse_target


@pytest.fixture(autouse=True)
def _restore_logging():
    """CLI runs point loguru at a captured stream; put stderr back."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def sources(write_js):
    """Two small source files."""
    return [
        write_js("a.js", "var Alpha = 1;\nexports.Foo = { bar: 1 };\n"),
        write_js("b.js", "function helper(x) {\n  return x;\n}\n"),
    ]


class TestCLIGroup:
    """Tests for main CLI group."""

    def test_cli_help(self, runner):
        """CLI shows help."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Codesurgeon" in result.output
        assert "Extract Top-Level JavaScript Declarations" in result.output

    def test_cli_version(self, runner):
        """CLI shows version."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "Codesurgeon v" in result.output

    def test_cli_no_command(self, runner):
        """CLI shows help when no command."""
        result = runner.invoke(cli)
        assert result.exit_code == 0
        assert "Usage:" in result.output


class TestParseTarget:
    def test_plain_name(self):
        assert parse_target("Alpha") == "Alpha"

    def test_rename(self):
        assert parse_target("Foo.Bar = Baz") == ("Foo.Bar", "Baz")


class TestExtractCommand:
    """Tests for extract command."""

    def test_extract_to_stdout(self, runner, sources):
        """Requested declarations are printed in request order."""
        result = runner.invoke(cli, ["extract", "-q", *sources, "-t", "helper", "-t", "Alpha"])
        assert result.exit_code == 0
        assert "function helper(x) {\n    return x;\n}\n\nvar Alpha = 1;\n\n" in result.output

    def test_extract_with_rename(self, runner, sources):
        result = runner.invoke(cli, ["extract", "-q", *sources, "-t", "exports.Foo=Thing"])
        assert result.exit_code == 0
        assert "exports.Thing = { bar: 1 };" in result.output

    def test_extract_without_targets_concatenates(self, runner, sources):
        result = runner.invoke(cli, ["extract", "-q", *sources])
        assert result.exit_code == 0
        assert "var Alpha = 1;" in result.output
        assert "function helper(x) {\n  return x;\n}" in result.output

    def test_extract_wrapped(self, runner, sources):
        result = runner.invoke(cli, [
            "extract", "-q", *sources, "-t", "Alpha",
            "--wrap", "declaration", "--identifier", "Mod", "--instance",
        ])
        assert result.exit_code == 0
        assert "var Mod = new function (exports) {" in result.output

    def test_extract_to_file(self, runner, sources, tmp_path):
        destination = tmp_path / "out.js"
        result = runner.invoke(cli, ["extract", "-q", *sources, "-t", "Alpha", "-o", str(destination)])
        assert result.exit_code == 0
        assert destination.read_text() == "\n\nvar Alpha = 1;\n\n"
        assert "Wrote" in result.output

    def test_extract_with_package(self, runner, sources, package_json, tmp_path):
        result = runner.invoke(cli, [
            "extract", "-q", *sources, "-t", "Alpha",
            "--package", package_json(version="0.9.0"),
            "-o", str(tmp_path / "out.js"),
        ])
        assert result.exit_code == 0
        assert "// Version 0.9.0" in (tmp_path / "out-0.9.0.js").read_text()

    def test_extract_minified(self, runner, sources):
        result = runner.invoke(cli, ["extract", "-q", *sources, "-t", "helper", "--minify"])
        assert result.exit_code == 0
        assert "return x;\n" not in result.output

    def test_extract_parse_error(self, runner, write_js):
        broken = write_js("broken.js", "var = ;\n")
        result = runner.invoke(cli, ["extract", "-q", broken, "-t", "a"])
        assert result.exit_code != 0
        assert "could not be parsed" in result.output
        assert "broken.js" in result.output

    def test_extract_missing_source(self, runner, tmp_path):
        result = runner.invoke(cli, ["extract", str(tmp_path / "missing.js")])
        assert result.exit_code != 0


class TestEntitiesCommand:
    def test_lists_resolved_entities(self, runner, sources, write_js):
        extra = write_js("c.js", "this.hidden = 1;\n")
        result = runner.invoke(cli, ["entities", *sources, extra])
        assert result.exit_code == 0
        assert "declaration" in result.output
        assert "Alpha" in result.output
        assert "exports.Foo" in result.output
        assert "helper" in result.output
        assert "hidden" not in result.output


class TestLintCommand:
    def test_permissive_passes(self, runner, write_js):
        path = write_js("ok.js", "var a = 1\nif (a == 1) { go(); }\n")
        result = runner.invoke(cli, ["lint", path])
        assert result.exit_code == 0
        assert "1 file(s) passed the permissive profile." in result.output

    def test_strict_fails(self, runner, write_js):
        path = write_js("loose.js", "var a = 1;\nif (a == 1) { go(); }\n")
        result = runner.invoke(cli, ["lint", "--strict", path])
        assert result.exit_code == 1
        assert f"{path}:2:" in result.output
        assert "[eqeqeq]" in result.output


class TestProbeCommand:
    def test_static_probe(self, runner, write_js, package_json):
        path = write_js("deps.js", 'require("colors");\nrequire("eyes");\nrequire("./local");\n')
        result = runner.invoke(cli, ["probe", path, "--package", package_json(dependencies={"colors": "0.6"})])
        assert result.exit_code == 0
        assert "  colors" in result.output
        assert "+ eyes" in result.output
        assert "./local (local, not inlined)" in result.output

    @pytest.mark.sandbox
    def test_sandbox_probe(self, runner, write_js):
        pytest.importorskip("quickjs")
        path = write_js("deps.js", 'if (false) { require("never"); }\nrequire("fs");\n')
        result = runner.invoke(cli, ["probe", "--sandbox", path])
        assert result.exit_code == 0
        assert "+ fs" in result.output
        assert "never" not in result.output
