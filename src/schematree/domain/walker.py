"""TreeWalker — lazy pre-order traversal over a normalized schema.

Driven by an explicit stack of pending frames so a consumer can advance it
one node at a time (e.g. at chunk-arrival rate). Reference nodes are
expanded in place from the side table: their term's children are pushed
with the reference node as parent, and the table entry itself is never
yielded.

A walker is not rewindable. Build a new one per traversal.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from schematree.domain.nodes import TypeNode, TypeSchema

type WalkStep = tuple[TypeNode | None, TypeNode]


class TreeWalker(Iterator[WalkStep]):
    """Iterator of ``(parent, node)`` pairs in encoder write order.

    Args:
        schema: The schema to traverse. It is only read.
        max_depth: When set, nodes deeper than this are still yielded but
            not expanded, which keeps listings of recursive types finite.
            The root is at depth 0.
    """

    def __init__(self, schema: TypeSchema, *, max_depth: int | None = None) -> None:
        self._schema = schema
        self._max_depth = max_depth
        self._stack: list[tuple[TypeNode | None, TypeNode, int]] = [(None, schema.root, 0)]
        self.truncated = False

    @property
    def done(self) -> bool:
        """True once every pending frame has been visited."""
        return not self._stack

    def __iter__(self) -> TreeWalker:
        return self

    def __next__(self) -> WalkStep:
        if not self._stack:
            raise StopIteration
        parent, node, depth = self._stack.pop()
        self._push_children(node, depth)
        return parent, node

    def _push_children(self, node: TypeNode, depth: int) -> None:
        children = self._schema.expansion(node)
        if not children:
            return
        if self._max_depth is not None and depth >= self._max_depth:
            self.truncated = True
            return
        for child in reversed(children):
            self._stack.append((node, child, depth + 1))
