"""SchemaSource — one reflection document plus its lazily derived artifacts.

Services receive a SchemaSource at construction time. The normalized
schema and its graph are built on first access and cached for the life of
the source; both are read-only afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from schematree.domain.attribution import ChunkPolicy
from schematree.domain.normalizer import get_schema
from schematree.infrastructure.loader import load_container

if TYPE_CHECKING:
    from schematree.config.settings import SchemaTreeSettings
    from schematree.domain.definitions import SchemaContainer
    from schematree.domain.nodes import TypeSchema
    from schematree.infrastructure.graph.engine import GraphEngine

logger = logging.getLogger(__name__)


class SchemaSource:
    """A reflection container with cached schema and graph."""

    def __init__(self, container: SchemaContainer, settings: SchemaTreeSettings) -> None:
        self.container = container
        self.settings = settings
        self._schema: TypeSchema | None = None
        self._graph: GraphEngine | None = None

    @classmethod
    def from_path(
        cls,
        path: Path,
        settings: SchemaTreeSettings,
        *,
        declaration: str | None = None,
    ) -> SchemaSource:
        """Load a reflection document from *path*.

        Raises:
            DefinitionLoadError: if the document cannot be read or validated.
        """
        container = load_container(path, declaration=declaration)
        logger.debug(
            "Loaded %d definitions from %s (root %s)",
            len(container.definitions),
            path,
            container.declaration,
        )
        return cls(container, settings)

    @property
    def schema(self) -> TypeSchema:
        """The normalized schema (built on first access)."""
        if self._schema is None:
            self._schema = get_schema(
                self.container,
                warn_unresolved=self.settings.classify.warn_unresolved,
            )
        return self._schema

    @property
    def graph(self) -> GraphEngine:
        """Graph engine over the normalized schema (created lazily)."""
        if self._graph is None:
            from schematree.infrastructure.graph.engine import GraphEngine

            self._graph = GraphEngine(self.schema)
        return self._graph

    @property
    def chunk_policy(self) -> ChunkPolicy:
        cfg = self.settings.attribution
        return ChunkPolicy(
            bool_chunks=cfg.bool_chunks,
            int_chunks=cfg.int_chunks,
            float_chunks=cfg.float_chunks,
            string_chunks=cfg.string_chunks,
            undefined_chunks=cfg.undefined_chunks,
        )
