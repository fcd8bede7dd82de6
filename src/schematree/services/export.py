"""ExportService — tree document and graph export.

Extends BaseService (operates on a loaded SchemaSource).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from schematree.domain.errors import SchemaTreeError
from schematree.services.base import BaseService
from schematree.services.result import ServiceResult

GRAPH_FORMATS = ("dot", "json")


class ExportService(BaseService):
    """Render the normalized schema for downstream consumers."""

    def export_tree(self, output: Path | None = None) -> ServiceResult:
        """Export the schema as a JSON document with ``schema`` and ``terms`` keys.

        Writes to *output* when given; the content is always returned in
        ``data["content"]``.
        """
        op = "export_tree"
        try:
            schema = self._source.schema
        except SchemaTreeError as exc:
            return self._error_result(op, exc)

        content = json.dumps(schema.to_dict(), indent=2) + "\n"
        payload: dict[str, Any] = {"format": "json", "content": content}
        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(content, encoding="utf-8")
            payload["path"] = str(output)
        return ServiceResult(ok=True, op=op, data=payload)

    def export_graph(self, *, fmt: str | None = None, output: Path | None = None) -> ServiceResult:
        """Export the schema graph.

        Formats:
        - ``dot``: Graphviz DOT language
        - ``json``: D3-compatible ``{"nodes": [...], "links": [...]}``

        Returns the content as a string in ``data["content"]``.
        """
        op = "export_graph"
        fmt = fmt or self._source.settings.export.graph_format
        if fmt not in GRAPH_FORMATS:
            return ServiceResult.failure(
                op,
                "INVALID_FORMAT",
                f"Unknown graph format: {fmt}",
                format=fmt,
                valid=list(GRAPH_FORMATS),
            )
        try:
            g = self._source.graph.graph
        except SchemaTreeError as exc:
            return self._error_result(op, exc)

        content = self._to_dot(g) if fmt == "dot" else self._to_d3_json(g)
        payload: dict[str, Any] = {
            "format": fmt,
            "content": content,
            "node_count": g.number_of_nodes(),
            "edge_count": g.number_of_edges(),
        }
        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(content, encoding="utf-8")
            payload["path"] = str(output)
        return ServiceResult(ok=True, op=op, data=payload)

    # ── Private helpers ───────────────────────────────────────────────

    @staticmethod
    def _to_dot(g: object) -> str:
        """Generate Graphviz DOT notation from a NetworkX DiGraph."""
        import networkx as nx

        assert isinstance(g, nx.DiGraph)
        lines = ["digraph schema {", "  rankdir=LR;", "  node [shape=box];"]

        for node_id, attrs in g.nodes(data=True):
            label = attrs.get("label", node_id)
            datatype = attrs.get("datatype", "")
            safe_id = str(node_id).replace('"', '\\"')
            text = f"{label}: {datatype}" if datatype else str(label)
            safe_label = text.replace('"', '\\"')
            lines.append(f'  "{safe_id}" [label="{safe_label}" datatype="{datatype}"];')

        for src, tgt, attrs in g.edges(data=True):
            edge_type = attrs.get("edge_type", "has_field")
            safe_src = str(src).replace('"', '\\"')
            safe_tgt = str(tgt).replace('"', '\\"')
            style = " style=dashed" if edge_type == "refers_to" else ""
            lines.append(f'  "{safe_src}" -> "{safe_tgt}" [label="{edge_type}"{style}];')

        lines.append("}")
        return "\n".join(lines) + "\n"

    @staticmethod
    def _to_d3_json(g: object) -> str:
        """Generate D3-compatible JSON from a NetworkX DiGraph."""
        import networkx as nx

        assert isinstance(g, nx.DiGraph)
        d3_nodes = [
            {
                "id": node_id,
                "label": attrs.get("label", ""),
                "datatype": attrs.get("datatype", ""),
                "term": attrs.get("term", ""),
            }
            for node_id, attrs in g.nodes(data=True)
        ]
        d3_links = [
            {"source": src, "target": tgt, "edge_type": attrs.get("edge_type", "has_field")}
            for src, tgt, attrs in g.edges(data=True)
        ]
        return json.dumps({"nodes": d3_nodes, "links": d3_links}, indent=2) + "\n"
