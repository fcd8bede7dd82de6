"""Subcommand modules for schematree.

Provides register_commands() which uses deferred imports to keep
``schematree --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the export group and the standalone commands on the root CLI group."""
    # --- Groups ---
    from schematree.commands.export import export

    cli.add_command(export)

    # --- Standalone commands ---
    from schematree.commands.attribute import attribute
    from schematree.commands.classify import classify
    from schematree.commands.show import show
    from schematree.commands.walk import walk

    cli.add_command(show)
    cli.add_command(classify)
    cli.add_command(walk)
    cli.add_command(attribute)
