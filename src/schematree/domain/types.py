"""Shape enum and the leaf / named shape groupings.

``Shape`` tags every TypeNode in a normalized tree.
"""

from __future__ import annotations

from enum import StrEnum


class Shape(StrEnum):
    """Structural shape of a TypeNode."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    STRUCT = "struct"
    ENUM = "enum"
    VARIANT = "variant"
    TUPLE = "tuple"
    ARRAY = "array"
    VEC = "vec"
    OPTION = "option"
    RESULT = "result"
    HASHSET = "hashset"
    HASHMAP = "hashmap"
    UNDEFINED = "undefined"


# Shapes that bear raw byte chunks directly.
LEAF_SHAPES: frozenset[Shape] = frozenset(
    {Shape.BOOL, Shape.INT, Shape.FLOAT, Shape.STRING}
)

# Shapes whose canonical expansion lives in the terms side table.
NAMED_SHAPES: frozenset[Shape] = frozenset({Shape.STRUCT, Shape.ENUM})
