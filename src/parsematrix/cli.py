"""
parsematrix CLI.

Helpers for writing fixtures: list the configured version matrix and decode
annotation blocks to check the ranges they describe.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from parsematrix._version import get_version
from parsematrix.core.config import load_config
from parsematrix.core.errors import ParseMatrixError
from parsematrix.core.source_map import decode_annotations

app = typer.Typer(help="Differential conformance testing for multi-version parsers")
console = Console()


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"parsematrix {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Enable debug logging")
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version"),
    ] = None,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@app.command("versions")
def versions_command(
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="Configuration file")
    ] = None,
) -> None:
    """List the configured family's versions in matrix order."""
    try:
        config = load_config(config_path)
        family = config.load_family()
    except ParseMatrixError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1) from e

    targets = set(config.target_versions(family))

    table = Table(title=f"{family.name} versions")
    table.add_column("Version")
    table.add_column("Parser")
    table.add_column("Targeted")
    for version, constructor in family.versions.items():
        table.add_row(
            version,
            getattr(constructor, "__name__", repr(constructor)),
            "[green]yes[/green]" if version in targets else "[dim]no[/dim]",
        )
    console.print(table)


@app.command("decode")
def decode_command(
    source: Annotated[str, typer.Argument(help="Annotation file, or - for stdin")],
) -> None:
    """Decode an annotation block and show each range, field and path."""
    text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")

    try:
        annotations = decode_annotations(text)
    except ParseMatrixError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1) from e

    table = Table(title="Annotations")
    table.add_column("Range")
    table.add_column("Field")
    table.add_column("Path")
    for annotation in annotations:
        table.add_row(
            str(annotation.span) if annotation.span else "[dim]none[/dim]",
            annotation.field,
            ".".join(annotation.path),
        )
    console.print(table)


def main(argv: list[str] | None = None) -> None:
    app(args=argv)


if __name__ == "__main__":
    main()
