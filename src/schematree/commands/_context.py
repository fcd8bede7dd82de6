"""AppContext — settings, document loading and result emission.

Created once by the root CLI group and handed to subcommands through
``@click.pass_obj``.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import click

from schematree.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from schematree.config.settings import SchemaTreeSettings
    from schematree.infrastructure.source import SchemaSource
    from schematree.services.result import ServiceResult


class AppContext:
    """Per-invocation state shared by every command.

    Reflection documents are only read when a command asks for a source,
    so ``--help`` and ``--version`` never touch the filesystem.
    """

    def __init__(self, settings: SchemaTreeSettings) -> None:
        self.settings = settings

        from schematree.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def load_source(self, path: str, declaration: str | None = None) -> SchemaSource:
        """Load a reflection document; unreadable documents end the command.

        A ``schematree.toml`` in the document's project replaces one
        discovered from the working directory.
        """
        from schematree.config.logging import bind_document
        from schematree.domain.errors import DefinitionLoadError
        from schematree.infrastructure.source import SchemaSource
        from schematree.services.result import ServiceResult

        bind_document(path)
        self.settings = self.settings.for_document(Path(path))
        try:
            return SchemaSource.from_path(Path(path), self.settings, declaration=declaration)
        except DefinitionLoadError as exc:
            self.fail(ServiceResult.failure("load_definitions", exc.code, str(exc), path=path))

    def emit(self, result: ServiceResult) -> None:
        """Write a ServiceResult with the right stream and exit code.

        Successful results go to stdout, with warnings on stderr unless
        they are already part of the JSON payload.  Failures go through
        :meth:`fail`.
        """
        if not result.ok:
            self.fail(result)
        settings = self.output_settings
        click.echo(format_result(result, settings=settings))
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)

    def fail(self, result: ServiceResult) -> NoReturn:
        """Write a failed result to stderr and exit with status 1."""
        click.echo(format_result(result, settings=self.output_settings), err=True)
        raise SystemExit(1)
