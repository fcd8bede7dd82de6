"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from schematree.output.console import create_console, get_output, style_for_shape

if TYPE_CHECKING:
    from rich.console import Console

    from schematree.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        return f"ERROR: {result.op} — {result.error_message}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("path", "")) for item in items if isinstance(item, dict))
    if "content" in result.data:
        return str(result.data["content"]).rstrip("\n")
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="st.ok")
    op = Text(f"  {result.op}", style="st.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="st.key")
    if key in ("term", "declaration"):
        v = Text(str(value), style="st.term")
    elif key == "path":
        v = Text(str(value), style="st.path")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _node_label(node: dict[str, Any]) -> Text:
    """One-line label for a serialized TypeNode."""
    datatype = str(node.get("datatype", ""))
    label = Text()
    if node.get("name"):
        label.append(f"{node['name']}: ", style="st.name")
    label.append(datatype, style=style_for_shape(datatype))
    details: list[str] = []
    if node.get("signed") is not None:
        details.append("signed" if node["signed"] else "unsigned")
    if node.get("length") is not None:
        details.append(f"length={node['length']}")
    if details:
        label.append(f" ({', '.join(details)})", style="dim")
    if node.get("term"):
        marker = " -> " if node.get("fields") is None else " "
        label.append(f"{marker}{node['term']}", style="st.term")
    return label


def _add_subtree(tree: Tree, node: dict[str, Any]) -> None:
    for child in node.get("fields") or []:
        branch = tree.add(_node_label(child))
        _add_subtree(branch, child)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    label = Text("ERROR", style="st.error")
    op = Text(f"  {result.op}", style="st.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(result.error_message))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}", markup=False)


# ── Schema renderers ──────────────────────────────────────────────────


def _render_schema(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the normalized root tree followed by each side-table term."""
    root = result.data.get("schema", {})
    tree = Tree(_node_label(root))
    _add_subtree(tree, root)
    console.print(tree)

    terms = result.data.get("terms", {})
    if terms:
        console.print()
        console.print(Text("terms:", style="st.key"))
        for term, node in terms.items():
            term_tree = Tree(Text(term, style="st.term"))
            _add_subtree(term_tree, node)
            console.print(term_tree)
    if verbose:
        _render_meta(console, result)


def _render_classification(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    for key in ("declaration", "datatype", "term", "signed", "length"):
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])
    members = result.data.get("members")
    if members:
        console.print(Text("  members:", style="st.key"))
        for member in members:
            name = f"{member['name']}: " if member.get("name") else ""
            console.print(f"    {name}{member['declaration']}", markup=False)


def _render_walk(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render walk steps in visit order."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Path", style="st.path")
    table.add_column("Type")
    table.add_column("Term", style="st.term")
    for item in items:
        datatype = str(item.get("datatype", ""))
        table.add_row(
            str(item.get("index", "")),
            Text(str(item.get("path", ""))),
            Text(datatype, style=style_for_shape(datatype)),
            Text(str(item.get("term") or "")),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} nodes")
    if verbose:
        _render_meta(console, result)


def _render_attribution(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render chunk-to-field attributions."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Field", style="st.path")
    table.add_column("Type")
    table.add_column("Part", justify="right")
    table.add_column("Bytes", justify="right")
    table.add_column("Hex", style="st.hex")
    for item in items:
        datatype = str(item.get("datatype", ""))
        table.add_row(
            str(item.get("sequence", "")),
            Text(str(item.get("path", ""))),
            Text(datatype, style=style_for_shape(datatype)),
            str(item.get("chunk_index", "")),
            str(item.get("size", "")),
            str(item.get("hex", "")),
        )
    console.print(table)
    chunks = result.data.get("chunk_count", len(items))
    console.print(f"\n{chunks} chunks, {result.data.get('byte_count', 0)} bytes")


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Print exported content, or a summary when it was written to a file."""
    if "path" in result.data:
        _status_line(console, result)
        for key in ("format", "path", "node_count", "edge_count"):
            if key in result.data:
                _field(console, key, result.data[key])
        return
    console.print(str(result.data.get("content", "")).rstrip("\n"), markup=False, soft_wrap=True)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "build_schema": _render_schema,
    "classify": _render_classification,
    "walk_schema": _render_walk,
    "attribute": _render_attribution,
    "export_tree": _render_export,
    "export_graph": _render_export,
}
