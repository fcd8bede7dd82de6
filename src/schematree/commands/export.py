"""Command group: export the normalized schema (tree document, graph)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from schematree.commands._base import SchemaGroup, definitions_argument
from schematree.services.export import GRAPH_FORMATS

if TYPE_CHECKING:
    from schematree.commands._context import AppContext

_EXPORT_EXAMPLES = """\
  schematree export tree defs.json --output schema.json
  schematree export graph defs.json --format dot
  schematree export graph defs.json --format json --output graph.json"""


@click.group(cls=SchemaGroup, examples=_EXPORT_EXAMPLES)
def export() -> None:
    """Export the normalized schema in various formats."""


@export.command(
    examples="""\
  schematree export tree defs.json
  schematree export tree defs.json --output schema.json"""
)
@definitions_argument
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of stdout.",
)
@click.pass_obj
def tree(app: AppContext, definitions: str, declaration: str | None, output: Path | None) -> None:
    """Export the schema and its terms as a JSON document."""
    from schematree.services.export import ExportService

    source = app.load_source(definitions, declaration)
    app.emit(ExportService(source).export_tree(output))


@export.command(
    examples="""\
  schematree export graph defs.json
  schematree export graph defs.json --format dot | dot -Tsvg > schema.svg
  schematree export graph defs.json --format json --output graph.json"""
)
@definitions_argument
@click.option(
    "--format",
    "fmt",
    type=click.Choice(GRAPH_FORMATS),
    default=None,
    help="Output format (default from [export] graph_format).",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of stdout.",
)
@click.pass_obj
def graph(
    app: AppContext,
    definitions: str,
    declaration: str | None,
    fmt: str | None,
    output: Path | None,
) -> None:
    """Export the schema as a field/reference graph."""
    from schematree.services.export import ExportService

    source = app.load_source(definitions, declaration)
    app.emit(ExportService(source).export_graph(fmt=fmt, output=output))
