"""Command: list schema nodes in encoder write order."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from schematree.commands._base import SchemaCommand, definitions_argument

if TYPE_CHECKING:
    from schematree.commands._context import AppContext


@click.command(
    cls=SchemaCommand,
    examples="""\
  schematree walk defs.json
  schematree walk defs.json --max-depth 4
  schematree -q walk defs.json""",
)
@definitions_argument
@click.option(
    "--max-depth",
    type=click.IntRange(min=0),
    default=None,
    help="Stop expanding below this depth (0 = unbounded).",
)
@click.pass_obj
def walk(
    app: AppContext,
    definitions: str,
    declaration: str | None,
    max_depth: int | None,
) -> None:
    """Walk the normalized schema depth-first."""
    from schematree.services.schema import SchemaService

    source = app.load_source(definitions, declaration)
    app.emit(SchemaService(source).walk_schema(max_depth=max_depth))
