"""Output mode selection for ServiceResult.

The CLI renders results for humans (Rich) or machines (--json). This layer
picks the mode; the renderers module does the drawing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from schematree.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output flags taken from the global CLI options."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON mode returns the serialized result; quiet mode returns a minimal
    line per item; otherwise Rich renders an operation-specific view.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    from schematree.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
