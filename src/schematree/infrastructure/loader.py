"""Reflection document loading.

A reflection document holds the root declaration and the flat definition
map produced by the external reflection facility. JSON (``.json``) and
TOML (``.toml``) documents are accepted::

    {"declaration": "Person", "definitions": {"Person": {"kind": "struct", ...}}}
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from schematree.domain.definitions import SchemaContainer
from schematree.domain.errors import DefinitionLoadError


def read_document(path: Path) -> dict[str, Any]:
    """Read a JSON or TOML document into a dict.

    Raises:
        DefinitionLoadError: if the file is missing or cannot be parsed.
    """
    if not path.is_file():
        raise DefinitionLoadError(f"Definition file not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".toml":
            data: Any = tomllib.loads(raw)
        else:
            data = json.loads(raw)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise DefinitionLoadError(f"Invalid document {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise DefinitionLoadError(f"Expected an object at the top of {path}")
    return data


def parse_container(data: dict[str, Any]) -> SchemaContainer:
    """Validate raw document data as a SchemaContainer.

    Raises:
        DefinitionLoadError: on any validation failure.
    """
    try:
        return SchemaContainer.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid definitions: {exc.error_count()} error(s)\n{exc}"
        raise DefinitionLoadError(msg) from exc


def load_container(path: Path, *, declaration: str | None = None) -> SchemaContainer:
    """Load a reflection document, optionally overriding its root declaration."""
    data = read_document(path)
    if declaration is not None:
        data = {**data, "declaration": declaration}
    return parse_container(data)
