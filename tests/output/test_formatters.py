"""Tests for output mode selection."""

import json

from cdpgen.output.formatters import OutputSettings, format_result
from cdpgen.services.result import ServiceError, ServiceResult

COMPILED = ServiceResult(
    ok=True,
    op="compile",
    data={
        "output": "/tmp/out/protocol.py",
        "target": "/tmp/out/protocol.py",
        "dry_run": False,
        "version": "1.3",
        "domains": 4,
        "declarations": 40,
        "methods": 7,
        "events": 5,
        "bytes": 9000,
    },
)


class TestFormatResult:
    def test_json_mode(self) -> None:
        out = format_result(COMPILED, settings=OutputSettings(json_output=True))
        parsed = json.loads(out)
        assert parsed["ok"] is True
        assert parsed["data"]["methods"] == 7

    def test_json_wins_over_quiet(self) -> None:
        out = format_result(COMPILED, settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(out)["op"] == "compile"

    def test_quiet_mode(self) -> None:
        out = format_result(COMPILED, settings=OutputSettings(quiet=True))
        assert out == "/tmp/out/protocol.py"

    def test_quiet_error(self) -> None:
        failed = ServiceResult(
            ok=False,
            op="compile",
            error=ServiceError(code="SCHEMA_FETCH", message="HTTP 404 while fetching schema"),
        )
        out = format_result(failed, settings=OutputSettings(quiet=True))
        assert out == "ERROR: compile: HTTP 404 while fetching schema"

    def test_default_is_rich(self) -> None:
        out = format_result(COMPILED)
        assert out.startswith("OK")
        assert "methods: 7" in out
