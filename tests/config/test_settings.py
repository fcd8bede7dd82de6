"""Tests for SchemaTreeSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from schematree.config.settings import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    SchemaTreeSettings,
    nearest_config,
)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = SchemaTreeSettings.from_cli(start=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.walk.max_depth == 32
        assert settings.attribution.string_chunks == 2

    def test_frozen(self, tmp_path: Path) -> None:
        settings = SchemaTreeSettings.from_cli(start=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "schematree.toml"
        toml.write_text('[walk]\nmax_depth = 8\n[export]\ngraph_format = "json"\n')
        settings = SchemaTreeSettings.from_cli(start=tmp_path)
        assert settings.walk.max_depth == 8
        assert settings.export.graph_format == "json"
        assert settings.classify.warn_unresolved is True  # default preserved
        assert settings.config_path == toml

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[attribution]\nfloat_chunks = 2\n")
        settings = SchemaTreeSettings.from_cli(config_path=str(custom), start=tmp_path)
        assert settings.attribution.float_chunks == 2
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "schematree.toml").write_text("[walk\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            SchemaTreeSettings.from_cli(start=tmp_path)


class TestPriority:
    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = SchemaTreeSettings.from_cli(
            start=tmp_path, json_output=True, quiet=True, verbose=True
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.verbose is True

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "schematree.toml").write_text("[walk]\nmax_depth = 8\n")
        monkeypatch.setenv("SCHEMATREE_WALK__MAX_DEPTH", "3")
        settings = SchemaTreeSettings.from_cli(start=tmp_path)
        assert settings.walk.max_depth == 3

    def test_cli_overrides_toml(self, tmp_path: Path) -> None:
        (tmp_path / "schematree.toml").write_text("quiet = true\n")
        settings = SchemaTreeSettings.from_cli(start=tmp_path, quiet=False)
        assert settings.quiet is False

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            SchemaTreeSettings.from_cli(config_path=str(tmp_path / "nope.toml"))


class TestDiscovery:
    def test_walks_up_from_start(self, tmp_path: Path) -> None:
        toml = tmp_path / CONFIG_FILENAME
        toml.write_text("[walk]\nmax_depth = 4\n")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        settings = SchemaTreeSettings.from_cli(start=child)
        assert settings.config_path == toml
        assert settings.config_origin == "discovered"
        assert settings.walk.max_depth == 4

    def test_nearest_config_none(self, tmp_path: Path) -> None:
        assert nearest_config(tmp_path) is None

    def test_env_var_pins_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[walk]\nmax_depth = 4\n")
        pinned = tmp_path / "pinned.toml"
        pinned.write_text("[walk]\nmax_depth = 9\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(pinned))
        settings = SchemaTreeSettings.from_cli(start=tmp_path)
        assert settings.config_path == pinned
        assert settings.config_origin == "env"
        assert settings.walk.max_depth == 9

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "gone.toml"))
        with pytest.raises(click.ClickException, match=CONFIG_ENV_VAR):
            SchemaTreeSettings.from_cli(start=tmp_path)

    def test_option_beats_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        chosen = tmp_path / "chosen.toml"
        chosen.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "gone.toml"))
        settings = SchemaTreeSettings.from_cli(config_path=str(chosen))
        assert settings.config_origin == "option"


class TestForDocument:
    @pytest.fixture
    def project(self, tmp_path: Path) -> Path:
        project = tmp_path / "project"
        (project / "schemas").mkdir(parents=True)
        (project / CONFIG_FILENAME).write_text("[walk]\nmax_depth = 2\n")
        return project

    def test_document_config_replaces_discovered(self, tmp_path: Path, project: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[walk]\nmax_depth = 7\n")
        settings = SchemaTreeSettings.from_cli(start=tmp_path, quiet=True)
        document = settings.for_document(project / "schemas" / "defs.json")
        assert document.config_path == project / CONFIG_FILENAME
        assert document.walk.max_depth == 2
        assert document.quiet is True

    def test_document_config_applies_without_cwd_config(
        self, tmp_path: Path, project: Path
    ) -> None:
        settings = SchemaTreeSettings.from_cli(start=tmp_path)
        assert settings.config_path is None
        assert settings.for_document(project / "defs.json").walk.max_depth == 2

    def test_same_config_is_reused(self, project: Path) -> None:
        settings = SchemaTreeSettings.from_cli(start=project)
        assert settings.for_document(project / "schemas" / "defs.json") is settings

    def test_no_document_config_keeps_discovered(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[walk]\nmax_depth = 7\n")
        settings = SchemaTreeSettings.from_cli(start=tmp_path)
        assert settings.for_document(tmp_path / "defs.json") is settings

    def test_pinned_config_wins(self, tmp_path: Path, project: Path) -> None:
        pinned = tmp_path / "pinned.toml"
        pinned.write_text("[walk]\nmax_depth = 9\n")
        settings = SchemaTreeSettings.from_cli(config_path=str(pinned))
        assert settings.for_document(project / "defs.json") is settings
