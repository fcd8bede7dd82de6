"""Schema normalizer — flat definition map to a deduplicated type tree.

Named composites (structs and enums) met away from the root are expanded
once into the ``terms`` side table; every occurrence, the first included,
becomes a reference node holding only its name and term. Terms under
expansion are tracked so self-referential types terminate; a cycle that
never passes through a struct or enum cannot be deduplicated and is
rejected.

INVARIANT: the root is always expanded inline, never demoted to a reference.
"""

from __future__ import annotations

import logging

from schematree.domain.classifier import Classification, classify
from schematree.domain.definitions import DefinitionMap, SchemaContainer
from schematree.domain.errors import RecursiveTypeError
from schematree.domain.nodes import TypeNode, TypeSchema
from schematree.domain.types import NAMED_SHAPES

logger = logging.getLogger(__name__)


class _Normalizer:
    """Single-use builder threading one side table through a whole walk."""

    def __init__(self, definitions: DefinitionMap, *, warn_unresolved: bool) -> None:
        self._definitions = definitions
        self._warn = warn_unresolved
        self.terms: dict[str, TypeNode] = {}
        self._expanding: set[str] = set()
        # Declarations expanded inline since the nearest enclosing term.
        self._inline: list[str] = []

    def build(self, declaration: str, name: str | None, *, root: bool = False) -> TypeNode:
        found = classify(declaration, self._definitions, warn=self._warn)
        if found.shape in NAMED_SHAPES and not root:
            self._intern(declaration, found)
            return TypeNode(shape=found.shape, name=name, term=declaration)
        if declaration in self._inline:
            start = self._inline.index(declaration)
            raise RecursiveTypeError((*self._inline[start:], declaration))
        self._inline.append(declaration)
        try:
            return self._expand(found, name)
        finally:
            self._inline.pop()

    def _intern(self, declaration: str, found: Classification) -> None:
        if declaration in self.terms or declaration in self._expanding:
            return
        self._expanding.add(declaration)
        outer, self._inline = self._inline, []
        try:
            self.terms[declaration] = self._expand(found, None)
        finally:
            self._inline = outer
            self._expanding.discard(declaration)
        logger.debug("Interned term %s", declaration)

    def _expand(self, found: Classification, name: str | None) -> TypeNode:
        children = None
        if found.members is not None:
            children = tuple(self.build(m.declaration, m.name) for m in found.members)
        return TypeNode(
            shape=found.shape,
            name=name,
            term=found.term,
            signed=found.signed,
            length=found.length,
            children=children,
        )


def normalize(
    root_declaration: str,
    definitions: DefinitionMap,
    *,
    warn_unresolved: bool = True,
) -> TypeSchema:
    """Build the TypeSchema rooted at *root_declaration*.

    The root node is named after its own declaration.

    Raises:
        UnsupportedWidthError: if any reachable numeric declaration has an
            unsupported width.
        RecursiveTypeError: if a type reaches itself through tuple structs or
            wrappers only.
    """
    normalizer = _Normalizer(definitions, warn_unresolved=warn_unresolved)
    root = normalizer.build(root_declaration, root_declaration, root=True)
    logger.debug("Normalized %s with %d terms", root_declaration, len(normalizer.terms))
    return TypeSchema(root=root, terms=normalizer.terms)


def get_schema(container: SchemaContainer, *, warn_unresolved: bool = True) -> TypeSchema:
    """Normalize a reflection container (root declaration + definitions)."""
    return normalize(container.declaration, container.definitions, warn_unresolved=warn_unresolved)
