"""Tests for the operation-specific Rich renderers."""

from __future__ import annotations

from pathlib import Path

from schematree.infrastructure.source import SchemaSource
from schematree.output.renderers import render_quiet, render_result
from schematree.services.export import ExportService
from schematree.services.result import ServiceError, ServiceResult
from schematree.services.schema import SchemaService

PROFILE_VALUE = {
    "name": "ann",
    "flag": True,
    "home": {"x": 1, "y": 2},
    "work": {"x": -1, "y": 0},
    "ratio": 0.5,
}


class TestSchemaRenderer:
    def test_tree_and_terms(self, person_source: SchemaSource) -> None:
        output = render_result(SchemaService(person_source).build_schema())
        assert "Person: struct Person" in output
        assert "other: struct -> Other" in output
        assert "age: int (unsigned, length=1)" in output
        assert "terms:" in output
        assert "Something" in output

    def test_verbose_shows_meta(self, person_source: SchemaSource) -> None:
        output = render_result(SchemaService(person_source).build_schema(), verbose=True)
        assert "term_count: 2" in output


class TestClassifyRenderer:
    def test_members(self, person_source: SchemaSource) -> None:
        output = render_result(SchemaService(person_source).classify_declaration("Something"))
        assert output.splitlines()[0].split() == ["OK", "classify"]
        assert "datatype: enum" in output
        assert "members:" in output
        assert "B: SomethingB" in output


class TestWalkRenderer:
    def test_table(self, person_source: SchemaSource) -> None:
        output = render_result(SchemaService(person_source).walk_schema())
        assert "Person/other/id" in output
        assert "15 nodes" in output

    def test_quiet_lists_paths(self, person_source: SchemaSource) -> None:
        output = render_quiet(SchemaService(person_source).walk_schema())
        lines = output.splitlines()
        assert lines[0] == "Person"
        assert lines[5] == "Person/other/id"
        assert len(lines) == 15


class TestAttributionRenderer:
    def test_table(self, profile_source: SchemaSource) -> None:
        output = render_result(SchemaService(profile_source).attribute_value(PROFILE_VALUE))
        assert "Profile/home/x" in output
        assert "03000000" in output
        assert "8 chunks, 32 bytes" in output


class TestExportRenderer:
    def test_content_is_printed_verbatim(self, profile_source: SchemaSource) -> None:
        result = ExportService(profile_source).export_graph(fmt="dot")
        output = render_result(result)
        assert output == result.data["content"].rstrip("\n")

    def test_summary_when_written(self, profile_source: SchemaSource, tmp_path: Path) -> None:
        output = render_result(ExportService(profile_source).export_tree(tmp_path / "s.json"))
        assert output.splitlines()[0].split() == ["OK", "export_tree"]
        assert "format: json" in output


class TestErrorRenderer:
    def _error(self) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op="build_schema",
            error=ServiceError(
                code="UNSUPPORTED_WIDTH",
                message="Unsupported width for 'u7' (0 bytes)",
                detail={"error_type": "UnsupportedWidthError"},
            ),
        )

    def test_message(self) -> None:
        output = render_result(self._error())
        assert output.splitlines()[0].startswith("ERROR   build_schema")
        assert "Unsupported width for 'u7'" in output
        assert "error_type" not in output

    def test_verbose_detail(self) -> None:
        output = render_result(self._error(), verbose=True)
        assert "error_type: UnsupportedWidthError" in output
