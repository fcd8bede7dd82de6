"""Byte-order attribution — pair encoder chunks with schema leaves.

An attributor owns one private TreeWalker and serves exactly one encode
invocation. Each arriving chunk goes to the current open leaf; when no
leaf is open the walker is advanced until one is found. Containers never
bear chunks: they are tracked as frames and close when their last child
closes, or immediately when they have no children. A recursive type whose
cycle holds no chunk-bearing leaf ends the traversal where it first
re-enters itself.

Chunk counts per leaf shape come from a :class:`ChunkPolicy`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from schematree.domain.errors import (
    AttributorInUseError,
    IncompleteAttributionError,
    NoPendingFieldError,
)
from schematree.domain.nodes import TypeNode, TypeSchema
from schematree.domain.types import Shape
from schematree.domain.walker import TreeWalker

logger = logging.getLogger(__name__)

type ChunkSink = Callable[[bytes], None]
type EncodeCall = Callable[[ChunkSink], object]


@dataclass(frozen=True)
class ChunkPolicy:
    """Number of raw chunks each leaf shape consumes before it closes.

    Strings take a length prefix chunk followed by a payload chunk. An
    ``undefined`` node is treated as an opaque leaf.
    """

    bool_chunks: int = 1
    int_chunks: int = 1
    float_chunks: int = 1
    string_chunks: int = 2
    undefined_chunks: int = 1

    def expected(self, node: TypeNode) -> int | None:
        """Chunk count for a leaf, or None if *node* is a container."""
        if node.shape is Shape.BOOL:
            return self.bool_chunks
        if node.shape is Shape.INT:
            return self.int_chunks
        if node.shape is Shape.FLOAT:
            return self.float_chunks
        if node.shape is Shape.STRING:
            return self.string_chunks
        if node.shape is Shape.UNDEFINED:
            return self.undefined_chunks
        return None


@dataclass(frozen=True)
class Attribution:
    """One chunk and the leaf it was written for."""

    sequence: int  # position of the chunk within the encode call
    chunk: bytes
    node: TypeNode
    path: tuple[str, ...]
    chunk_index: int  # position of the chunk within its leaf

    @property
    def path_str(self) -> str:
        return "/".join(self.path)

    def to_dict(self) -> dict[str, object]:
        return {
            "sequence": self.sequence,
            "path": self.path_str,
            "datatype": self.node.shape.value,
            "chunk_index": self.chunk_index,
            "size": len(self.chunk),
            "hex": self.chunk.hex(),
        }


class _ContainerFrame:
    __slots__ = ("node", "path", "remaining", "next_index", "leaves_before")

    def __init__(
        self, node: TypeNode, path: tuple[str, ...], remaining: int, leaves_before: int
    ) -> None:
        self.node = node
        self.path = path
        self.remaining = remaining
        self.next_index = 0
        self.leaves_before = leaves_before  # leaves opened when this frame was pushed


class _LeafFrame:
    __slots__ = ("node", "path", "expected", "seen")

    def __init__(self, node: TypeNode, path: tuple[str, ...], expected: int) -> None:
        self.node = node
        self.path = path
        self.expected = expected
        self.seen = 0


def _path_segment(node: TypeNode, index: int, *, root: bool) -> str:
    if root and node.term is not None:
        return node.term
    if node.name is not None:
        return node.name
    return str(index)


class ChunkAttributor:
    """Attribute the chunks of one encode call to the leaves of *schema*."""

    def __init__(self, schema: TypeSchema, policy: ChunkPolicy | None = None) -> None:
        self._schema = schema
        self._policy = policy or ChunkPolicy()
        self._walker = TreeWalker(schema)
        self._containers: list[_ContainerFrame] = []
        self._leaf: _LeafFrame | None = None
        self._sequence = 0
        self._bound = False
        self._leaves_opened = 0
        self._stalled = False

    @property
    def exhausted(self) -> bool:
        """True when no chunk-bearing leaf remains.

        Answering may advance the traversal past trailing zero-chunk leaves
        and empty containers, opening the next leaf if there is one.
        """
        if self._leaf is None:
            self._advance()
        return self._leaf is None

    def feed(self, chunk: bytes) -> Attribution:
        """Attribute one raw *chunk* to the next pending leaf.

        Raises:
            NoPendingFieldError: if the traversal holds no further leaf.
        """
        self._bound = True
        leaf = self._leaf or self._advance()
        if leaf is None:
            raise NoPendingFieldError(
                f"No pending field for chunk #{self._sequence} ({len(chunk)} bytes)"
            )
        attribution = Attribution(
            sequence=self._sequence,
            chunk=bytes(chunk),
            node=leaf.node,
            path=leaf.path,
            chunk_index=leaf.seen,
        )
        self._sequence += 1
        leaf.seen += 1
        if leaf.seen >= leaf.expected:
            self._leaf = None
            self._close_child()
        return attribution

    def capture(self, encode: EncodeCall) -> list[Attribution]:
        """Run *encode* with a sink bound to this attributor.

        ``encode`` is called once with a ``sink(bytes)`` callable and must
        emit its chunks in write order.

        Raises:
            AttributorInUseError: if this attributor already received chunks
                or is serving another encode call.
        """
        if self._bound:
            raise AttributorInUseError("Attributor is already bound to an encode call")
        self._bound = True
        results: list[Attribution] = []

        def sink(chunk: bytes) -> None:
            results.append(self.feed(chunk))

        encode(sink)
        logger.debug("Attributed %d chunks", len(results))
        return results

    def finish(self) -> None:
        """Drain the traversal, requiring every leaf to have been satisfied.

        Raises:
            IncompleteAttributionError: if a leaf still expects chunks.
        """
        leaf = self._leaf or self._advance()
        if leaf is None:
            return
        if leaf.seen == 0:
            raise IncompleteAttributionError(f"Field {'/'.join(leaf.path)} received no chunks")
        raise IncompleteAttributionError(
            f"Field {'/'.join(leaf.path)} received {leaf.seen} of {leaf.expected} chunks"
        )

    def _advance(self) -> _LeafFrame | None:
        """Pull walker output until a chunk-bearing leaf opens.

        Returns None once the walker is done, or once it re-enters a term
        it is already inside without having opened a leaf in between. From
        there the walk repeats itself forever and never reaches a leaf.
        """
        if self._stalled:
            return None
        for parent, node in self._walker:
            index = 0
            path: tuple[str, ...] = ()
            if self._containers:
                top = self._containers[-1]
                index = top.next_index
                top.next_index += 1
                path = top.path
            path = (*path, _path_segment(node, index, root=parent is None))

            expected = self._policy.expected(node)
            if expected is not None:
                if expected <= 0:
                    self._close_child()
                    continue
                self._leaves_opened += 1
                self._leaf = _LeafFrame(node, path, expected)
                return self._leaf
            remaining = len(self._schema.expansion(node))
            if remaining == 0:
                self._close_child()
                continue
            if self._reenters_without_leaf(node):
                logger.warning(
                    "%s recurses into %s without reaching a chunk-bearing field",
                    "/".join(path),
                    node.term,
                )
                self._stalled = True
                return None
            self._containers.append(_ContainerFrame(node, path, remaining, self._leaves_opened))
        return None

    def _reenters_without_leaf(self, node: TypeNode) -> bool:
        if node.term is None:
            return False
        return any(
            frame.node.term == node.term and frame.leaves_before == self._leaves_opened
            for frame in self._containers
        )

    def _close_child(self) -> None:
        """Record one closed child on the innermost container, cascading upward."""
        while self._containers:
            top = self._containers[-1]
            top.remaining -= 1
            if top.remaining > 0:
                return
            self._containers.pop()
