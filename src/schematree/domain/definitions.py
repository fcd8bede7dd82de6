"""Flat definition models produced by the reflection facility.

A reflection export is a root declaration plus a map from declaration
strings to structural definitions::

    {
      "declaration": "Person",
      "definitions": {
        "Person": {"kind": "struct", "fields": [["name", "string"], ["cool", "bool"]]},
        "Vec<u128>": {"kind": "sequence", "elements": "u128"}
      }
    }

Definitions are read-only; nothing in the core mutates them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter


class StructDefinition(BaseModel):
    """Composite with named fields."""

    model_config = {"frozen": True}

    kind: Literal["struct"] = "struct"
    fields: tuple[tuple[str, str], ...] = ()


class TupleStructDefinition(BaseModel):
    """Composite with positional fields (also used for data-carrying enum variants)."""

    model_config = {"frozen": True}

    kind: Literal["tuple_struct"] = "tuple_struct"
    elements: tuple[str, ...] = ()


class UnitStructDefinition(BaseModel):
    """Composite with no fields."""

    model_config = {"frozen": True}

    kind: Literal["unit_struct"] = "unit_struct"


class ArrayDefinition(BaseModel):
    """Fixed-size homogeneous sequence."""

    model_config = {"frozen": True}

    kind: Literal["array"] = "array"
    elements: str
    length: int = Field(ge=0)


class SequenceDefinition(BaseModel):
    """Variable-length homogeneous sequence (Vec, HashSet, HashMap)."""

    model_config = {"frozen": True}

    kind: Literal["sequence"] = "sequence"
    elements: str


class TupleDefinition(BaseModel):
    """Anonymous positional product type."""

    model_config = {"frozen": True}

    kind: Literal["tuple"] = "tuple"
    elements: tuple[str, ...] = ()


class EnumDefinition(BaseModel):
    """Tagged variant set: ordered ``(variant_name, declaration)`` pairs."""

    model_config = {"frozen": True}

    kind: Literal["enum"] = "enum"
    variants: tuple[tuple[str, str], ...] = ()


Definition = Annotated[
    StructDefinition
    | TupleStructDefinition
    | UnitStructDefinition
    | ArrayDefinition
    | SequenceDefinition
    | TupleDefinition
    | EnumDefinition,
    Field(discriminator="kind"),
]

DefinitionMap = Mapping[str, Definition]

_DEFINITIONS_ADAPTER: TypeAdapter[dict[str, Definition]] = TypeAdapter(dict[str, Definition])


class SchemaContainer(BaseModel):
    """Root declaration plus its flat definition map."""

    model_config = {"frozen": True}

    declaration: str
    definitions: dict[str, Definition] = Field(default_factory=dict)


def parse_definitions(raw: Mapping[str, Any]) -> dict[str, Definition]:
    """Validate a raw ``{declaration: definition}`` mapping."""
    return _DEFINITIONS_ADAPTER.validate_python(dict(raw))
