"""Tests for the show command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from schematree.cli import cli


class TestShowCommand:
    def test_tree(self, cli_runner: CliRunner, person_path: Path) -> None:
        result = cli_runner.invoke(cli, ["show", str(person_path)])
        assert result.exit_code == 0
        assert "Person: struct Person" in result.output
        assert "terms:" in result.output

    def test_json(self, cli_runner: CliRunner, person_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "show", str(person_path)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["op"] == "build_schema"
        assert data["data"]["schema"]["fields"][3]["term"] == "Other"

    def test_root_override(self, cli_runner: CliRunner, person_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "show", str(person_path), "--root", "Other"])
        assert json.loads(result.stdout)["data"]["declaration"] == "Other"

    def test_toml_document(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "defs.toml"
        path.write_text('declaration = "u16"\n[definitions]\n')
        result = cli_runner.invoke(cli, ["--json", "show", str(path)])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["schema"]["length"] == 2

    def test_unsupported_width(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"declaration": "u9", "definitions": {}}))
        result = cli_runner.invoke(cli, ["show", str(path)])
        assert result.exit_code == 1
        assert "Unsupported width" in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["show", str(tmp_path / "nope.json")])
        assert result.exit_code == 2
