"""Normalized type tree: TypeNode and TypeSchema.

INVARIANT: a node carrying a ``term`` but no ``children`` is a reference
node. Its expansion lives in ``TypeSchema.terms`` under that term.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from schematree.domain.types import LEAF_SHAPES, NAMED_SHAPES, Shape

if TYPE_CHECKING:
    from schematree.domain.walker import TreeWalker


@dataclass(frozen=True)
class TypeNode:
    """One node of a normalized type tree."""

    shape: Shape = Shape.UNDEFINED
    name: str | None = None  # per occurrence, set by the parent
    term: str | None = None  # declaration of a named struct/enum
    signed: bool | None = None
    length: int | None = None
    children: tuple[TypeNode, ...] | None = None

    @property
    def is_leaf(self) -> bool:
        return self.shape in LEAF_SHAPES

    @property
    def is_reference(self) -> bool:
        return self.term is not None and self.children is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "datatype": self.shape.value,
            "name": self.name,
            "term": self.term,
            "signed": self.signed,
            "length": self.length,
            "fields": (
                [child.to_dict() for child in self.children] if self.children is not None else None
            ),
        }


@dataclass(frozen=True)
class TypeSchema:
    """A root node plus the side table of canonical named expansions.

    Attributes:
        root: Root node, always expanded inline.
        terms: Declaration string -> fully expanded struct/enum node.
    """

    root: TypeNode
    terms: dict[str, TypeNode] = field(default_factory=dict)

    def expansion(self, node: TypeNode) -> tuple[TypeNode, ...]:
        """Children visited beneath *node*, splicing in the side table for references."""
        if node.children is not None:
            return node.children
        if node.shape in NAMED_SHAPES and node.term is not None:
            entry = self.terms.get(node.term)
            if entry is not None and entry.children is not None:
                return entry.children
        return ()

    def walk(self, *, max_depth: int | None = None) -> TreeWalker:
        """Start a fresh pre-order traversal of this schema."""
        from schematree.domain.walker import TreeWalker

        return TreeWalker(self, max_depth=max_depth)

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema": self.root.to_dict(),
            "terms": {term: node.to_dict() for term, node in self.terms.items()},
        }
