"""Command-line interface for Codesurgeon.

Extracted source goes to STDOUT (unless written to a file); progress and
diagnostics go to STDERR through loguru, so the output can be piped.
"""

from __future__ import annotations

from pathlib import Path

import click

from codesurgeon import __version__
from codesurgeon.config import SurgeonConfig
from codesurgeon.constants import RENAME_DELIMITER
from codesurgeon.extraction import is_resolved
from codesurgeon.postprocess import (
    SandboxDependencyProber,
    StaticDependencyProber,
    ValidationProfile,
    Validator,
)
from codesurgeon.session import Codesurgeon
from codesurgeon.types.errors import CodesurgeonError
from codesurgeon.utils.logger import configure_logging

_SOURCES = click.argument(
    "sources",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False),
)


def parse_target(raw: str) -> str | tuple[str, str]:
    """``NAME`` extracts as-is; ``NAME=NEW`` extracts and renames."""
    if RENAME_DELIMITER in raw:
        name, new_name = raw.split(RENAME_DELIMITER, 1)
        return name.strip(), new_name.strip()
    return raw.strip()


def _session(quiet: bool = False, separator: str | None = None) -> Codesurgeon:
    overrides: dict[str, object] = {}
    if quiet:
        overrides["quiet"] = True
    if separator is not None:
        overrides["separator"] = separator.replace("\\n", "\n")
    return Codesurgeon(SurgeonConfig.from_env(), **overrides)


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="codesurgeon", message="Codesurgeon v%(version)s")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Codesurgeon - Extract Top-Level JavaScript Declarations.

    Pull named variables, functions, classes and member assignments out
    of JavaScript sources and compose them into a new file.
    """
    configure_logging(debug=debug or None)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@_SOURCES
@click.option(
    "-t", "--target", "targets", multiple=True,
    help=f"Top-level name to extract (repeatable). NAME{RENAME_DELIMITER}NEW renames it.",
)
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write to this file instead of STDOUT.")
@click.option("--append", is_flag=True, help="Append to the output file instead of truncating it.")
@click.option("--wrap", "wrap_type", type=click.Choice(["expression", "declaration"]), help="Wrap the result in a closure.")
@click.option("--identifier", help="Binding name for --wrap declaration.")
@click.option("--instance", is_flag=True, help="Instantiate the declaration closure with 'new'.")
@click.option("--signature", default="exports", show_default=True, help="Closure parameter list.")
@click.option("--params", default="window", show_default=True, help="Arguments the closure is invoked with.")
@click.option("--minify", is_flag=True, help="Minify the result.")
@click.option("--no-mangle", is_flag=True, help="With --minify, keep local names.")
@click.option("--no-squeeze", is_flag=True, help="With --minify, keep layout.")
@click.option("--package", "package_file", type=click.Path(exists=True, dir_okay=False), help="package.json for banner and version.")
@click.option("--separator", help="Text between fragments (\\n allowed).")
@click.option("-q", "--quiet", is_flag=True, help="Only log at debug level.")
def extract(
    sources: tuple[str, ...],
    targets: tuple[str, ...],
    output: str | None,
    append: bool,
    wrap_type: str | None,
    identifier: str | None,
    instance: bool,
    signature: str,
    params: str,
    minify: bool,
    no_mangle: bool,
    no_squeeze: bool,
    package_file: str | None,
    separator: str | None,
    quiet: bool,
) -> None:
    """Extract top-level declarations from SOURCES.

    With no --target the sources are concatenated unchanged.
    """
    try:
        surgeon = _session(quiet, separator)
        if package_file:
            surgeon.package(package_file)
        surgeon.read(*sources)
        surgeon.extract(*(parse_target(t) for t in targets))
        if wrap_type:
            surgeon.wrap(
                type=wrap_type,
                identifier=identifier,
                instance=instance,
                signature=signature,
                params=params,
            )
        if minify:
            surgeon.minify(mangle=not no_mangle, squeeze=not no_squeeze)
    except CodesurgeonError as e:
        raise click.ClickException(e.get_formatted_message()) from e

    if output:
        surgeon.write(output, append=append)
        if surgeon.context.new_file is None:
            raise click.ClickException(f"Could not write {output}")
        click.echo(f"Wrote {surgeon.context.new_file}", err=True)
    else:
        click.echo(surgeon.output, nl=False)


@cli.command()
@_SOURCES
def entities(sources: tuple[str, ...]) -> None:
    """List the top-level entities in SOURCES."""
    try:
        found = _session(quiet=True).read(*sources).entities()
    except CodesurgeonError as e:
        raise click.ClickException(e.get_formatted_message()) from e

    for entity in found:
        if not is_resolved(entity):
            continue
        click.echo(f"{entity.node.line:>6}  {entity.shape:<12} {entity.name}")


@cli.command()
@_SOURCES
@click.option("--strict", is_flag=True, help="Use the strict profile instead of the permissive one.")
@click.pass_context
def lint(ctx: click.Context, sources: tuple[str, ...], strict: bool) -> None:
    """Report lint diagnostics for SOURCES."""
    profile = ValidationProfile.STRICT if strict else ValidationProfile.PERMISSIVE
    validator = Validator()
    failed = False

    for source in sources:
        report = validator.check(Path(source).read_text(encoding="utf-8"), profile)
        for d in report.diagnostics:
            click.echo(f"{source}:{d.line}:{d.column}: [{d.rule}] {d.message}")
        failed = failed or not report.valid

    if failed:
        ctx.exit(1)
    click.echo(f"{len(sources)} file(s) passed the {profile} profile.")


@cli.command()
@_SOURCES
@click.option("--sandbox", is_flag=True, help="Execute in a QuickJS sandbox instead of reading the tree.")
@click.option("--package", "package_file", type=click.Path(exists=True, dir_okay=False), help="package.json listing known dependencies.")
def probe(sources: tuple[str, ...], sandbox: bool, package_file: str | None) -> None:
    """List the modules SOURCES load at runtime."""
    prober = SandboxDependencyProber() if sandbox else StaticDependencyProber()
    try:
        surgeon = _session(quiet=True)
        if package_file:
            surgeon.package(package_file)
        surgeon.read(*sources).extract().probe(prober)
    except CodesurgeonError as e:
        raise click.ClickException(e.get_formatted_message()) from e
    except ImportError as e:
        raise click.ClickException(
            "The sandbox prober needs QuickJS: pip install 'codesurgeon[sandbox]'"
        ) from e

    report = surgeon.context.last_probe
    assert report is not None
    for name in sorted(report.discovered):
        marker = "+" if name in report.new else " "
        click.echo(f"{marker} {name}")
    for name in report.local:
        click.echo(f"  {name} (local, not inlined)")
    for error in report.errors:
        click.echo(f"error: {error}", err=True)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
