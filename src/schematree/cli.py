"""``schematree`` entry point: global output and config flags, then subcommands."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click

from schematree import __version__
from schematree.commands import register_commands
from schematree.commands._context import AppContext
from schematree.config.settings import CONFIG_ENV_VAR, CONFIG_FILENAME, SchemaTreeSettings

_EPILOG = (
    f"Settings come from --config, ${CONFIG_ENV_VAR}, or the nearest {CONFIG_FILENAME} "
    "above the definitions document or the working directory."
)

# Flags that select how results are written; forwarded to SchemaTreeSettings as-is.
_OUTPUT_FLAGS = (
    click.option("--json", "json_output", is_flag=True, help="Print the raw result as JSON."),
    click.option("-q", "--quiet", is_flag=True, help="Print only paths or exported content."),
    click.option("-v", "--verbose", is_flag=True, help="Show meta blocks and debug logs."),
    click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines."),
)


def _output_flags[F: Callable[..., Any]](func: F) -> F:
    for option in reversed(_OUTPUT_FLAGS):
        func = option(func)
    return func


@click.group(
    invoke_without_command=True,
    epilog=_EPILOG,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(__version__, prog_name="schematree")
@_output_flags
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help=f"Read settings from this file instead of discovering {CONFIG_FILENAME}.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **output_flags: bool) -> None:
    """schematree — Borsh schema normalization and chunk attribution."""
    ctx.obj = AppContext(SchemaTreeSettings.from_cli(config_path=config_path, **output_flags))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
