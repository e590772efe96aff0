"""CLI entry point for jaded.

Invoked as::

    jaded [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m jaded.cli.main

Commands
--------
decode      Decode a Java serialization stream to JSON or YAML
render      Render any byte blob as readable text
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from jaded.parser.parser import ParserOptions

if TYPE_CHECKING:
    from jaded.model.values import Content

console = Console()
err_console = Console(stderr=True)


def _read_input(path: str, is_hex: bool) -> bytes:
    """Read a file as raw bytes, or as hex text with ``is_hex``, exiting on error."""
    try:
        data = Path(path).read_bytes()
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)
    if not is_hex:
        return data
    try:
        return bytes.fromhex(data.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        err_console.print(f"[red]Error:[/red] {path} does not contain hex text")
        sys.exit(1)


def _decode_or_exit(data: bytes, path: str, options: ParserOptions, read_all: bool) -> list["Content"]:
    """Decode a stream, printing errors and exiting on failure."""
    import jaded
    from jaded.errors import JavaError, StreamError

    try:
        if read_all:
            return jaded.read_all(data, options)
        return [jaded.parse(data, options)]
    except StreamError as exc:
        err_console.print(f"[red]Decode error[/red] in {path}: {exc}")
        sys.exit(1)
    except JavaError as exc:
        err_console.print(f"[red]Error:[/red] {path}: {exc}")
        sys.exit(1)


def _emit(text: str, lang: str, output: str | None, label: str) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]{label} written to[/green] {output}")
    else:
        console.print(Syntax(text, lang, line_numbers=True))


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="jaded")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log decoding steps to stderr")
def cli(verbose: bool) -> None:
    """Java serialization stream decoder."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from jaded import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]jaded[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# decode command
# ---------------------------------------------------------------------------


@cli.command(name="decode")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format",
)
@click.option("--hex", "is_hex", is_flag=True, default=False, help="FILE holds hex text instead of raw bytes")
@click.option("--all", "read_all", is_flag=True, default=False, help="Decode every item, not just the first")
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=ParserOptions.max_depth,
    show_default=True,
    help="Maximum nesting depth of records",
)
@click.option(
    "--max-nodes",
    type=click.IntRange(min=1),
    default=ParserOptions.max_nodes,
    show_default=True,
    help="Maximum number of values built for one item",
)
@click.option(
    "--warn-trailing/--no-warn-trailing",
    default=ParserOptions.warn_trailing_data,
    show_default=True,
    help="Warn when data follows the first item",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def decode_command(
    file: str,
    output_format: str,
    is_hex: bool,
    read_all: bool,
    max_depth: int,
    max_nodes: int,
    warn_trailing: bool,
    output: str | None,
) -> None:
    """Decode a Java serialization stream and dump its contents.

    FILE is the path to the serialized data.

    Examples:

    \b
        jaded decode demo.obj
        jaded decode demo.obj --format yaml --all
        jaded decode dump.hex --hex --output demo.json
    """
    import json

    import yaml

    from jaded.model.serializer import ValueSerializer

    options = ParserOptions(max_depth=max_depth, warn_trailing_data=warn_trailing, max_nodes=max_nodes)
    data = _read_input(file, is_hex)
    contents = _decode_or_exit(data, file, options, read_all)

    serializer = ValueSerializer()
    if read_all:
        items = [serializer.to_dict(content) for content in contents]
        if output_format.lower() == "json":
            text = json.dumps(items, indent=2, ensure_ascii=False)
        else:
            text = yaml.dump(items, default_flow_style=False, allow_unicode=True)
    elif output_format.lower() == "json":
        text = serializer.to_json(contents[0], indent=2)
    else:
        text = serializer.to_yaml(contents[0])

    _emit(text, output_format.lower(), output, "Decoded value")


# ---------------------------------------------------------------------------
# render command
# ---------------------------------------------------------------------------


@cli.command(name="render")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Format for Java-serialized data",
)
@click.option("--hex", "is_hex", is_flag=True, default=False, help="FILE holds hex text instead of raw bytes")
def render_command(file: str, output_format: str, is_hex: bool) -> None:
    """Render any byte blob as readable text.

    Java-serialized data is decoded; anything else is shown as UTF-8 text
    or, failing that, with non-ASCII bytes escaped.

    FILE is the path to the blob.
    """
    from jaded.render.blob import ContentType, deserialize_bytes

    data = _read_input(file, is_hex)
    text, content_type = deserialize_bytes(data, ContentType(output_format.lower()))
    if content_type is None:
        console.print(text, markup=False, highlight=False)
    else:
        console.print(Syntax(text, content_type.value, line_numbers=True))


if __name__ == "__main__":
    cli()
