"""Click base classes and shared parameters for schematree commands.

SchemaCommand and SchemaGroup accept an ``examples`` keyword; passing
``--examples`` on the command line prints them and exits without touching
any reflection document.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click


class _ExamplesMixin:
    """Adds an eager ``--examples`` flag when examples are supplied."""

    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return

        def print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
            if value:
                click.echo(f"Examples for '{ctx.command_path}':\n")
                click.echo(examples)
                ctx.exit(0)

        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=print_examples,
                help="Show usage examples.",
            )
        )


class SchemaCommand(_ExamplesMixin, click.Command):
    """Command with optional ``--examples``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class SchemaGroup(_ExamplesMixin, click.Group):
    """Group with optional ``--examples``; subcommands default to SchemaCommand."""

    command_class = SchemaCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


def definitions_argument[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Apply the DEFINITIONS argument and the ``--root`` override."""
    func = click.option(
        "--root",
        "declaration",
        default=None,
        help="Override the document's root declaration.",
    )(func)
    func = click.argument(
        "definitions",
        type=click.Path(exists=True, dir_okay=False),
    )(func)
    return func
