"""Tests for CompileService."""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path

import pytest

from cdpgen.config.settings import CdpgenSettings
from cdpgen.infrastructure.sources import LocalSchemaSource
from cdpgen.services.compile import CompileService
from cdpgen.services.telemetry import _current_span, disable_telemetry, enable_telemetry


@pytest.fixture
def settings(tmp_path: Path, schema_dir: Path) -> CdpgenSettings:
    base = CdpgenSettings.from_cli(project_root=tmp_path)
    return base.with_source(offline=True, local_dir=str(schema_dir))


@pytest.fixture
def _telemetry() -> Generator[None]:
    enable_telemetry()
    yield
    disable_telemetry()
    _current_span.set(None)


class TestCompile:
    def test_writes_module(self, settings: CdpgenSettings, tmp_path: Path) -> None:
        result = CompileService(settings).compile()
        assert result.ok
        target = tmp_path / "protocol.py"
        assert result.data["output"] == str(target.resolve())
        assert result.data["version"] == "1.3"
        assert result.data["domains"] == 4
        assert result.data["methods"] == 7
        assert result.data["events"] == 5
        assert result.data["offline"] is True
        text = target.read_text(encoding="utf-8")
        assert result.data["bytes"] == len(text)
        compile(text, str(target), "exec")

    def test_explicit_output(self, settings: CdpgenSettings, tmp_path: Path) -> None:
        target = tmp_path / "gen" / "cdp.py"
        result = CompileService(settings).compile(output=target)
        assert result.ok
        assert target.is_file()
        assert result.data["target"] == str(target)

    def test_dry_run_writes_nothing(self, settings: CdpgenSettings, tmp_path: Path) -> None:
        result = CompileService(settings).compile(dry_run=True)
        assert result.ok
        assert result.data["dry_run"] is True
        assert result.data["output"] is None
        assert not (tmp_path / "protocol.py").exists()

    def test_injected_source(self, tmp_path: Path, schema_dir: Path) -> None:
        settings = CdpgenSettings.from_cli(project_root=tmp_path)
        service = CompileService(settings, source=LocalSchemaSource(schema_dir))
        assert service.compile(dry_run=True).ok

    def test_dangling_ref_is_error_result(
        self, settings: CdpgenSettings, tmp_path: Path
    ) -> None:
        only_browser = settings.with_source(files=("browser_protocol.json",))
        result = CompileService(only_browser).compile()
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "SCHEMA_REFERENCE"
        assert result.error.detail == {"path": "DOM.resolveNode.object"}
        assert not (tmp_path / "protocol.py").exists()

    def test_missing_schema_is_fetch_error(self, tmp_path: Path) -> None:
        settings = CdpgenSettings.from_cli(project_root=tmp_path).with_source(
            offline=True, local_dir="nowhere"
        )
        result = CompileService(settings).compile()
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "SCHEMA_FETCH"
        assert result.error.detail["path"] == str(tmp_path / "nowhere" / "js_protocol.json")

    def test_malformed_schema(self, settings: CdpgenSettings, schema_dir: Path) -> None:
        (schema_dir / "js_protocol.json").write_text(json.dumps({"domains": 1}))
        result = CompileService(settings).compile()
        assert result.error is not None
        assert result.error.code == "SCHEMA_PARSE"

    def test_non_utf8_schema(self, settings: CdpgenSettings, schema_dir: Path) -> None:
        (schema_dir / "js_protocol.json").write_bytes(b'{"domains": ["\xff"]}')
        result = CompileService(settings).compile()
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "SCHEMA_PARSE"
        assert result.error.detail["path"] == str(schema_dir / "js_protocol.json")

    def test_unwritable_output(self, settings: CdpgenSettings, tmp_path: Path) -> None:
        target = tmp_path / "taken"
        target.mkdir()
        result = CompileService(settings).compile(output=target)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "OUTPUT_WRITE"
        assert result.error.detail["path"] == str(target)
        assert target.is_dir()

    @pytest.mark.usefixtures("_telemetry")
    def test_phase_spans(self, settings: CdpgenSettings) -> None:
        result = CompileService(settings).compile()
        assert result.meta is not None
        telemetry = result.meta["telemetry"]
        assert telemetry["name"] == "CompileService.compile"
        assert [c["name"] for c in telemetry["children"]] == [
            "fetch",
            "compile",
            "render",
            "write",
        ]

    def test_project_templates(self, settings: CdpgenSettings, tmp_path: Path) -> None:
        templates = tmp_path / "my-templates"
        templates.mkdir()
        (templates / "module.py.j2").write_text("# {{ tree.version }}\n", encoding="utf-8")
        custom = settings.model_copy(
            update={"output": settings.output.model_copy(update={"templates": "my-templates"})}
        )
        result = CompileService(custom).compile()
        assert result.ok
        assert (tmp_path / "protocol.py").read_text(encoding="utf-8") == "# 1.3\n"


class TestInspect:
    def test_summary(self, settings: CdpgenSettings) -> None:
        result = CompileService(settings).inspect()
        assert result.ok
        assert result.data["version"] == "1.3"
        by_name = {d["name"]: d for d in result.data["domains"]}
        assert list(by_name) == ["Runtime", "Target", "DOM", "Input"]
        assert by_name["DOM"]["imports"] == ["Runtime"]
        assert by_name["DOM"]["commands"] == 2
        assert by_name["DOM"]["events"] == 2
        assert by_name["Input"]["types"] == 2  # the two synthesized enums

    def test_single_domain(self, settings: CdpgenSettings) -> None:
        result = CompileService(settings).inspect(domain="Target")
        assert result.ok
        assert result.data["domain"] == "Target"
        assert result.data["methods"] == ["Target.attachToTarget"]
        names = [d["name"] for d in result.data["declarations"]]
        assert names[:3] == [
            "TargetID",
            "AttachToTargetParameters",
            "AttachToTargetReturnObject",
        ]
        assert "events.TargetDestroyedEvent" in names
        assert result.data["count"] == len(names)

    def test_unknown_domain(self, settings: CdpgenSettings) -> None:
        result = CompileService(settings).inspect(domain="Nope")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_DOMAIN"
        assert "DOM" in result.error.detail["known"]
