"""GraphEngine — lazy-built NetworkX graph of a normalized schema.

Every node occurrence in the root tree and in each side-table expansion
becomes a graph node keyed by its path. Two edge types:
- ``has_field``: container -> child occurrence
- ``refers_to``: reference node -> ``term:<declaration>`` expansion

The graph is built from the deduplicated form, so recursive types stay
finite here even though their walks do not.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from schematree.domain.nodes import TypeNode, TypeSchema

type _Graph = nx.DiGraph

TERM_PREFIX = "term:"


def term_id(term: str) -> str:
    return f"{TERM_PREFIX}{term}"


class GraphEngine:
    """Lazy-loading graph engine over one TypeSchema."""

    def __init__(self, schema: TypeSchema) -> None:
        self._schema = schema
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building it on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def _build(self) -> _Graph:
        """Build a DiGraph from the root tree and every term expansion.

        Term nodes are added first so reference edges always land on an
        existing node.
        """
        g: _Graph = nx.DiGraph()
        for term in self._schema.terms:
            g.add_node(term_id(term), datatype="", label=term, term=term)
        root = self._schema.root
        self._add(g, root, root.term or root.name or "root", None)
        for term, node in self._schema.terms.items():
            self._add(g, node, term_id(term), None, existing=True)
        return g

    def _add(
        self,
        g: _Graph,
        node: TypeNode,
        node_id: str,
        parent_id: str | None,
        *,
        existing: bool = False,
    ) -> None:
        label = node.name or node.term or node.shape.value
        if existing:
            g.nodes[node_id].update(datatype=node.shape.value)
        else:
            g.add_node(node_id, datatype=node.shape.value, label=label, term=node.term or "")
        if parent_id is not None:
            g.add_edge(parent_id, node_id, edge_type="has_field")
        if node.is_reference and node.term is not None:
            g.add_edge(node_id, term_id(node.term), edge_type="refers_to")
            return
        for index, child in enumerate(node.children or ()):
            segment = child.name if child.name is not None else str(index)
            self._add(g, child, f"{node_id}/{segment}", node_id)
