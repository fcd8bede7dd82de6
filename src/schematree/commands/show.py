"""Command: print the normalized schema of a reflection document."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from schematree.commands._base import SchemaCommand, definitions_argument

if TYPE_CHECKING:
    from schematree.commands._context import AppContext


@click.command(
    cls=SchemaCommand,
    examples="""\
  schematree show defs.json
  schematree show defs.json --root Other
  schematree --json show defs.toml""",
)
@definitions_argument
@click.pass_obj
def show(app: AppContext, definitions: str, declaration: str | None) -> None:
    """Normalize the root declaration and print its tree and terms."""
    from schematree.services.schema import SchemaService

    source = app.load_source(definitions, declaration)
    app.emit(SchemaService(source).build_schema())
