"""Rich Console factory and theme for schematree output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SCHEMA_THEME = Theme(
    {
        "st.ok": "bold green",
        "st.error": "bold red",
        "st.warning": "bold yellow",
        "st.op": "bold cyan",
        "st.key": "dim",
        "st.name": "bold",
        "st.term": "bold blue",
        "st.path": "dim",
        "st.hex": "magenta",
        "st.shape.leaf": "green",
        "st.shape.container": "cyan",
        "st.shape.undefined": "bold red",
    }
)

_LEAF_SHAPES = frozenset({"bool", "int", "float", "string"})


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SCHEMA_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_shape(datatype: str) -> str:
    """Return the Rich style name for a node datatype."""
    if datatype == "undefined":
        return "st.shape.undefined"
    if datatype in _LEAF_SHAPES:
        return "st.shape.leaf"
    return "st.shape.container"
