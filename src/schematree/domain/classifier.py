"""Declaration classifier — one declaration string to one shape.

Pure function of (declaration, definition map). Composite shapes hand back
their member declarations; recursing into them is the normalizer's job.

Resolution order:
1. ``Option<``/``Result<``/``HashSet<``/``HashMap<`` skip the generic
   definition lookup (they are stored as enums and sequences and would
   otherwise lose their identity).
2. Definition map lookup, dispatching on the definition kind.
3. Literal primitives, sized numerics and generic wrapper prefixes.
4. Anything else is ``undefined``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from schematree.domain.definitions import (
    ArrayDefinition,
    Definition,
    DefinitionMap,
    EnumDefinition,
    SequenceDefinition,
    StructDefinition,
    TupleDefinition,
    TupleStructDefinition,
    UnitStructDefinition,
)
from schematree.domain.errors import UnsupportedWidthError
from schematree.domain.types import Shape

logger = logging.getLogger(__name__)

INTEGER_WIDTHS: frozenset[int] = frozenset({1, 2, 4, 8, 16})
FLOAT_WIDTHS: frozenset[int] = frozenset({4, 8})

_DEFERRED_PREFIXES = ("Option<", "Result<", "HashSet<", "HashMap<")

_UNSIGNED_PATTERN = re.compile(r"^u(\d+)$")
_SIGNED_PATTERN = re.compile(r"^i(\d+)$")
_FLOAT_PATTERN = re.compile(r"^f(\d+)$")

_TUPLE_PATTERN = re.compile(r"^Tuple<.*>$")
_ARRAY_PATTERN = re.compile(r"^Array<.*>$")
_VEC_PATTERN = re.compile(r"^Vec<.*>$")
_OPTION_PATTERN = re.compile(r"^Option<.*>$")
_RESULT_PATTERN = re.compile(r"^Result<.*>$")
_HASHSET_PATTERN = re.compile(r"^HashSet<.*>$")
_HASHMAP_PATTERN = re.compile(r"^HashMap<.*>$")


@dataclass(frozen=True)
class Member:
    """A constituent declaration of a composite, optionally named."""

    declaration: str
    name: str | None = None


@dataclass(frozen=True)
class Classification:
    """Shape of one declaration plus the member declarations to recurse into.

    ``members`` is None for scalars and unit variants (no children at all)
    and a possibly empty tuple for every other composite.
    """

    shape: Shape
    term: str | None = None
    signed: bool | None = None
    length: int | None = None
    members: tuple[Member, ...] | None = None


UNDEFINED = Classification(shape=Shape.UNDEFINED)


def classify(declaration: str, definitions: DefinitionMap, *, warn: bool = True) -> Classification:
    """Classify *declaration* against *definitions*.

    Raises:
        UnsupportedWidthError: for ``u``/``i``/``f`` declarations whose width
            is not a supported byte length.
    """
    if not declaration.startswith(_DEFERRED_PREFIXES):
        definition = definitions.get(declaration)
        if definition is not None:
            resolved = _classify_definition(declaration, definition)
            if resolved is not None:
                return resolved

    result = _classify_literal(declaration, definitions)
    if result.shape is Shape.UNDEFINED and warn:
        logger.warning("Unresolved declaration: %s", declaration)
    return result


def _classify_definition(declaration: str, definition: Definition) -> Classification | None:
    """Dispatch on a definition found directly under *declaration*."""
    if isinstance(definition, StructDefinition):
        return Classification(
            shape=Shape.STRUCT,
            term=declaration,
            members=tuple(Member(decl, name) for name, decl in definition.fields),
        )
    if isinstance(definition, TupleStructDefinition):
        return Classification(
            shape=Shape.VARIANT,
            length=len(definition.elements),
            members=tuple(Member(decl) for decl in definition.elements),
        )
    if isinstance(definition, UnitStructDefinition):
        return Classification(shape=Shape.VARIANT)
    if isinstance(definition, ArrayDefinition):
        return Classification(
            shape=Shape.ARRAY,
            length=definition.length,
            members=(Member(definition.elements),),
        )
    if isinstance(definition, SequenceDefinition):
        return Classification(shape=Shape.VEC, members=(Member(definition.elements),))
    if isinstance(definition, EnumDefinition):
        return Classification(
            shape=Shape.ENUM,
            term=declaration,
            length=len(definition.variants),
            members=tuple(Member(decl, name) for name, decl in definition.variants),
        )
    # Tuples are only recognized through their ``Tuple<...>`` declaration.
    return None


def _numeric_width(declaration: str, bits: str, allowed: frozenset[int]) -> int:
    """Convert a bit count to a byte length, rejecting unsupported widths."""
    count = int(bits)
    byte_length = count // 8
    if count % 8 or byte_length not in allowed:
        raise UnsupportedWidthError(declaration, byte_length)
    return byte_length


def _classify_literal(declaration: str, definitions: DefinitionMap) -> Classification:
    """Resolve primitives and generic wrappers (steps 3-5)."""
    if declaration == "bool":
        return Classification(shape=Shape.BOOL)
    if declaration == "string":
        return Classification(shape=Shape.STRING)

    match = _UNSIGNED_PATTERN.match(declaration)
    if match:
        length = _numeric_width(declaration, match.group(1), INTEGER_WIDTHS)
        return Classification(shape=Shape.INT, signed=False, length=length)
    match = _SIGNED_PATTERN.match(declaration)
    if match:
        length = _numeric_width(declaration, match.group(1), INTEGER_WIDTHS)
        return Classification(shape=Shape.INT, signed=True, length=length)
    match = _FLOAT_PATTERN.match(declaration)
    if match:
        length = _numeric_width(declaration, match.group(1), FLOAT_WIDTHS)
        return Classification(shape=Shape.FLOAT, length=length)

    definition = definitions.get(declaration)

    if _TUPLE_PATTERN.match(declaration):
        if isinstance(definition, TupleDefinition):
            return Classification(
                shape=Shape.TUPLE,
                length=len(definition.elements),
                members=tuple(Member(decl) for decl in definition.elements),
            )
        return UNDEFINED
    if _ARRAY_PATTERN.match(declaration):
        if isinstance(definition, ArrayDefinition):
            return Classification(
                shape=Shape.ARRAY,
                length=definition.length,
                members=(Member(definition.elements),),
            )
        return UNDEFINED
    for pattern, shape in (
        (_VEC_PATTERN, Shape.VEC),
        (_HASHSET_PATTERN, Shape.HASHSET),
        (_HASHMAP_PATTERN, Shape.HASHMAP),
    ):
        if pattern.match(declaration):
            if isinstance(definition, SequenceDefinition):
                return Classification(shape=shape, members=(Member(definition.elements),))
            return UNDEFINED
    if _OPTION_PATTERN.match(declaration):
        # Only the "present" arm is kept.
        if isinstance(definition, EnumDefinition) and len(definition.variants) >= 2:
            return Classification(
                shape=Shape.OPTION, members=(Member(definition.variants[1][1]),)
            )
        return UNDEFINED
    if _RESULT_PATTERN.match(declaration):
        if isinstance(definition, EnumDefinition) and len(definition.variants) >= 2:
            ok, err = definition.variants[0], definition.variants[1]
            return Classification(shape=Shape.RESULT, members=(Member(ok[1]), Member(err[1])))
        return UNDEFINED

    return UNDEFINED
