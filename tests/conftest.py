"""Shared pytest fixtures and test helpers for schematree tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from schematree.config.settings import SchemaTreeSettings
from schematree.infrastructure.source import SchemaSource
from tests.documents import NODE_DOC, PERSON_DOC, PROFILE_DOC, write_document

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep a developer's schematree.toml or SCHEMATREE_* env out of tests."""
    monkeypatch.delenv("SCHEMATREE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings(tmp_path: Path) -> SchemaTreeSettings:
    return SchemaTreeSettings.from_cli(start=tmp_path)


@pytest.fixture
def person_path(tmp_path: Path) -> Path:
    return write_document(tmp_path, PERSON_DOC, "person.json")


@pytest.fixture
def profile_path(tmp_path: Path) -> Path:
    return write_document(tmp_path, PROFILE_DOC, "profile.json")


@pytest.fixture
def node_path(tmp_path: Path) -> Path:
    return write_document(tmp_path, NODE_DOC, "node.json")


@pytest.fixture
def person_source(person_path: Path, settings: SchemaTreeSettings) -> SchemaSource:
    return SchemaSource.from_path(person_path, settings)


@pytest.fixture
def profile_source(profile_path: Path, settings: SchemaTreeSettings) -> SchemaSource:
    return SchemaSource.from_path(profile_path, settings)


@pytest.fixture
def node_source(node_path: Path, settings: SchemaTreeSettings) -> SchemaSource:
    return SchemaSource.from_path(node_path, settings)
