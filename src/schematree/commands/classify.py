"""Command: classify a single declaration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from schematree.commands._base import SchemaCommand

if TYPE_CHECKING:
    from schematree.commands._context import AppContext


@click.command(
    cls=SchemaCommand,
    examples="""\
  schematree classify defs.json u64
  schematree classify defs.json Person
  schematree classify defs.json 'Option<u32>'""",
)
@click.argument("definitions", type=click.Path(exists=True, dir_okay=False))
@click.argument("declaration")
@click.pass_obj
def classify(app: AppContext, definitions: str, declaration: str) -> None:
    """Classify DECLARATION against the definitions in DEFINITIONS."""
    from schematree.services.schema import SchemaService

    source = app.load_source(definitions)
    app.emit(SchemaService(source).classify_declaration(declaration))
