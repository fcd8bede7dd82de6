"""Unified settings: CLI flags, env vars and ``schematree.toml`` in one object.

Priority chain (highest to lowest):
  1. Init kwargs  : global CLI flags passed by Click
  2. Env vars     : ``SCHEMATREE_*``; nested keys use ``__``
                  (``SCHEMATREE_WALK__MAX_DEPTH=8``)
  3. TOML file    : see below
  4. Code defaults: baked into the section models

The TOML file is the first of:
  - ``--config PATH``
  - ``$SCHEMATREE_CONFIG``
  - the nearest ``schematree.toml`` above the definitions document
  - the nearest ``schematree.toml`` above the working directory

A file named by ``--config`` or the environment must exist. Discovered
files are optional, and the document's own project wins over the one the
command was started from.
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any, Literal

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from schematree.config.models import (
    AttributionConfig,
    ClassifyConfig,
    ExportConfig,
    WalkConfig,
)

CONFIG_FILENAME = "schematree.toml"
CONFIG_ENV_VAR = "SCHEMATREE_CONFIG"

ConfigOrigin = Literal["option", "env", "discovered"]

_CLI_FLAGS = {"json_output", "quiet", "verbose", "log_json"}


def nearest_config(start: Path) -> Path | None:
    """The closest ``schematree.toml`` in *start* or one of its parents."""
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _pinned_config(config_path: str | None) -> tuple[Path, ConfigOrigin] | None:
    named: list[tuple[str | None, ConfigOrigin, str]] = [
        (config_path, "option", "--config"),
        (os.environ.get(CONFIG_ENV_VAR), "env", CONFIG_ENV_VAR),
    ]
    for value, origin, label in named:
        if not value:
            continue
        path = Path(value)
        if not path.is_file():
            raise click.ClickException(f"Config file not found: {value} (from {label})")
        return path, origin
    return None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by one already located TOML file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = _read_toml(toml_path) if toml_path is not None else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# The TOML path chosen by from_cli() for the settings object under construction.
_pending = threading.local()


class SchemaTreeSettings(BaseSettings):
    """Frozen settings for one schematree invocation.

    Stored on the AppContext at the CLI root and read by services through
    their SchemaSource.

    Attributes:
        config_path: The TOML file that was applied, or None.
        config_origin: How *config_path* was chosen. Only discovered files
            give way to one found beside the definitions document.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SCHEMATREE_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None
    config_origin: ConfigOrigin | None = None

    # --- Global CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    classify: ClassifyConfig = Field(default_factory=ClassifyConfig)
    walk: WalkConfig = Field(default_factory=WalkConfig)
    attribution: AttributionConfig = Field(default_factory=AttributionConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """CLI kwargs, then environment, then the TOML file."""
        toml_source = TomlSettingsSource(settings_cls, getattr(_pending, "toml_path", None))
        return init_settings, env_settings, toml_source

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> SchemaTreeSettings:
        """Build settings for a CLI invocation.

        Without a pinned file, ``schematree.toml`` is discovered by walking
        up from *start* (default: cwd).

        Raises:
            click.ClickException: if a pinned config file is missing, or the
                chosen file is not valid TOML.
        """
        toml_path: Path | None = None
        origin: ConfigOrigin | None = None
        pinned = _pinned_config(config_path)
        if pinned is not None:
            toml_path, origin = pinned
        else:
            toml_path = nearest_config(start or Path.cwd())
            origin = "discovered" if toml_path is not None else None

        _pending.toml_path = toml_path
        try:
            return cls(config_path=toml_path, config_origin=origin, **cli_flags)
        finally:
            _pending.toml_path = None

    def for_document(self, document: Path) -> SchemaTreeSettings:
        """Settings for a command reading the definitions file *document*.

        Returns ``self`` unless a ``schematree.toml`` above *document*
        differs from the discovered one, in which case settings are rebuilt
        from that file with the same global flags.
        """
        if self.config_origin in ("option", "env"):
            return self
        found = nearest_config(document.parent)
        if found is None or found == self.config_path:
            return self
        return type(self).from_cli(start=document.parent, **self.model_dump(include=_CLI_FLAGS))
