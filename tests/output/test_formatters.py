"""Tests for the format_result dispatcher and OutputSettings."""

import json

from schematree.output.formatters import OutputSettings, format_result
from schematree.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="ERR", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        output = format_result(
            _ok("classify", datatype="int"), settings=OutputSettings(json_output=True)
        )
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "classify"
        assert data["data"]["datatype"] == "int"

    def test_json_mode_error(self) -> None:
        settings = OutputSettings(json_output=True)
        output = format_result(_err("walk_schema", "Bad"), settings=settings)
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["message"] == "Bad"

    def test_json_wins_over_quiet(self) -> None:
        output = format_result(_ok(), settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(output)["ok"] is True


class TestFormatResultQuiet:
    def test_quiet_success(self) -> None:
        output = format_result(_ok("build_schema"), settings=OutputSettings(quiet=True))
        assert output == "OK: build_schema"

    def test_quiet_error(self) -> None:
        settings = OutputSettings(quiet=True)
        output = format_result(_err("build_schema", "Bad input"), settings=settings)
        assert output.startswith("ERROR: build_schema")
        assert "Bad input" in output

    def test_quiet_items_list_paths(self) -> None:
        result = _ok("walk_schema", items=[{"path": "P"}, {"path": "P/a"}])
        assert format_result(result, settings=OutputSettings(quiet=True)) == "P\nP/a"

    def test_quiet_content(self) -> None:
        result = _ok("export_tree", content='{"a": 1}\n')
        assert format_result(result, settings=OutputSettings(quiet=True)) == '{"a": 1}'


class TestFormatResultDefault:
    def test_no_settings_renders_rich(self) -> None:
        output = format_result(_ok("unknown_op", key="val"))
        assert "OK" in output
        assert "key: val" in output
