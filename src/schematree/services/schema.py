"""SchemaService — build, classify, walk and attribute.

Extends BaseService (operates on a loaded SchemaSource).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from schematree.domain.attribution import Attribution, ChunkAttributor
from schematree.domain.classifier import classify
from schematree.domain.errors import IncompleteAttributionError, SchemaTreeError
from schematree.domain.nodes import TypeNode, TypeSchema
from schematree.domain.types import Shape
from schematree.domain.walker import TreeWalker
from schematree.infrastructure.encoder import BorshEncoder
from schematree.services.base import BaseService
from schematree.services.result import ServiceResult


def _unresolved_paths(schema: TypeSchema) -> list[str]:
    """Paths of every ``undefined`` node in the root tree and the side table."""
    found: list[str] = []

    def visit(node: TypeNode, path: str) -> None:
        if node.shape is Shape.UNDEFINED:
            found.append(path)
        for index, child in enumerate(node.children or ()):
            visit(child, f"{path}/{child.name if child.name is not None else index}")

    root = schema.root
    visit(root, root.term or root.name or "root")
    for term, node in schema.terms.items():
        visit(node, term)
    return found


def _paths(walker: TreeWalker) -> Iterator[tuple[tuple[str, ...], TypeNode | None, TypeNode]]:
    """Attach root-relative paths to the steps of *walker*.

    The parent of each step is matched by identity against the innermost
    open ancestor, which is always on the stack in a pre-order walk.
    """
    # [node, path, next child index]
    open_nodes: list[list[Any]] = []
    for parent, node in walker:
        if parent is None:
            path: tuple[str, ...] = (node.term or node.name or "root",)
        else:
            while open_nodes and open_nodes[-1][0] is not parent:
                open_nodes.pop()
            top = open_nodes[-1]
            segment = node.name if node.name is not None else str(top[2])
            top[2] += 1
            path = (*top[1], segment)
        open_nodes.append([node, path, 0])
        yield path, parent, node


class SchemaService(BaseService):
    """Schema normalization, traversal and chunk attribution."""

    def build_schema(self) -> ServiceResult:
        """Normalize the source's root declaration into a TypeSchema."""
        op = "build_schema"
        try:
            schema = self._source.schema
        except SchemaTreeError as exc:
            return self._error_result(op, exc)

        warnings = [f"Unresolved declaration at {path}" for path in _unresolved_paths(schema)]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "declaration": self._source.container.declaration,
                **schema.to_dict(),
            },
            warnings=warnings,
            meta={"term_count": len(schema.terms)},
        )

    def classify_declaration(self, declaration: str) -> ServiceResult:
        """Classify a single declaration without normalizing its members."""
        op = "classify"
        try:
            found = classify(
                declaration,
                self._source.container.definitions,
                warn=self._source.settings.classify.warn_unresolved,
            )
        except SchemaTreeError as exc:
            return self._error_result(op, exc)

        warnings: list[str] = []
        if found.shape is Shape.UNDEFINED:
            warnings.append(f"Unresolved declaration: {declaration}")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "declaration": declaration,
                "datatype": found.shape.value,
                "term": found.term,
                "signed": found.signed,
                "length": found.length,
                "members": (
                    [{"name": m.name, "declaration": m.declaration} for m in found.members]
                    if found.members is not None
                    else None
                ),
            },
            warnings=warnings,
        )

    def walk_schema(self, *, max_depth: int | None = None) -> ServiceResult:
        """List nodes in encoder write order.

        Args:
            max_depth: Expansion limit; defaults to ``[walk] max_depth``
                (0 means unbounded, which never ends for recursive types).
        """
        op = "walk_schema"
        if max_depth is None:
            max_depth = self._source.settings.walk.max_depth
        limit = max_depth or None
        try:
            schema = self._source.schema
        except SchemaTreeError as exc:
            return self._error_result(op, exc)

        walker = schema.walk(max_depth=limit)
        steps: list[dict[str, Any]] = []
        for path, parent, node in _paths(walker):
            steps.append(
                {
                    "index": len(steps),
                    "path": "/".join(path),
                    "parent": "/".join(path[:-1]) if parent is not None else None,
                    "datatype": node.shape.value,
                    "name": node.name,
                    "term": node.term,
                    "leaf": node.is_leaf,
                }
            )

        warnings: list[str] = []
        if walker.truncated:
            warnings.append(f"Walk truncated at depth {limit}")
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": steps, "count": len(steps)},
            warnings=warnings,
            meta={"max_depth": limit, "truncated": walker.truncated},
        )

    def attribute_chunks(self, chunks: Iterable[bytes], *, strict: bool = False) -> ServiceResult:
        """Attribute an already captured chunk sequence."""
        op = "attribute"
        try:
            attributor = ChunkAttributor(self._source.schema, self._source.chunk_policy)

            def replay(sink: Any) -> None:
                for chunk in chunks:
                    sink(chunk)

            results = attributor.capture(replay)
        except SchemaTreeError as exc:
            return self._error_result(op, exc)
        return self._attribution_result(op, attributor, results, strict=strict)

    def attribute_value(self, value: Any, *, strict: bool = False) -> ServiceResult:
        """Encode *value* as the root declaration and attribute each chunk."""
        op = "attribute"
        container = self._source.container
        encoder = BorshEncoder(container.definitions)
        try:
            attributor = ChunkAttributor(self._source.schema, self._source.chunk_policy)
            results = attributor.capture(encoder.bind(value, container.declaration))
        except SchemaTreeError as exc:
            return self._error_result(op, exc)
        return self._attribution_result(op, attributor, results, strict=strict)

    def _attribution_result(
        self,
        op: str,
        attributor: ChunkAttributor,
        results: list[Attribution],
        *,
        strict: bool,
    ) -> ServiceResult:
        warnings: list[str] = []
        try:
            attributor.finish()
        except IncompleteAttributionError as exc:
            if strict:
                return self._error_result(op, exc)
            warnings.append(str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "items": [item.to_dict() for item in results],
                "chunk_count": len(results),
                "byte_count": sum(len(item.chunk) for item in results),
            },
            warnings=warnings,
        )
