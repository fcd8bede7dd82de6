"""Command: attribute encoder chunks to schema fields."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from schematree.commands._base import SchemaCommand, definitions_argument

if TYPE_CHECKING:
    from schematree.commands._context import AppContext


def _read_chunks(path: Path) -> list[bytes]:
    """One hex-encoded chunk per line; blank lines and ``#`` comments are skipped."""
    chunks: list[bytes] = []
    for lineno, raw in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        try:
            chunks.append(bytes.fromhex(line))
        except ValueError as exc:
            raise click.BadParameter(
                f"line {lineno}: not a hex chunk: {line!r}", param_hint="--chunks"
            ) from exc
    return chunks


def _read_value(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"invalid JSON: {exc}", param_hint="--value") from exc


@click.command(
    cls=SchemaCommand,
    examples="""\
  schematree attribute defs.json --value person.json
  schematree attribute defs.json --chunks captured.hex
  schematree attribute defs.json --chunks captured.hex --strict
  schematree --json attribute defs.json --value person.json""",
)
@definitions_argument
@click.option(
    "--value",
    "value_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON value to encode as the root declaration.",
)
@click.option(
    "--chunks",
    "chunks_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Captured chunks, one hex string per line.",
)
@click.option("--strict", is_flag=True, help="Fail if the chunks end mid-field.")
@click.pass_obj
def attribute(
    app: AppContext,
    definitions: str,
    declaration: str | None,
    value_file: Path | None,
    chunks_file: Path | None,
    strict: bool,
) -> None:
    """Map each written chunk to the field that produced it."""
    from schematree.services.schema import SchemaService

    if (value_file is None) == (chunks_file is None):
        raise click.UsageError("Pass exactly one of --value or --chunks.")

    if value_file is not None:
        value = _read_value(value_file)
        source = app.load_source(definitions, declaration)
        app.emit(SchemaService(source).attribute_value(value, strict=strict))
    else:
        assert chunks_file is not None
        chunks = _read_chunks(chunks_file)
        source = app.load_source(definitions, declaration)
        app.emit(SchemaService(source).attribute_chunks(chunks, strict=strict))
