"""Tests for the compile command."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from cdpgen.cli import cli


class TestCompileCommand:
    def test_writes_configured_output(self, cli_runner: CliRunner, offline_project: Path) -> None:
        result = cli_runner.invoke(cli, ["compile"])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        target = offline_project / "out" / "protocol.py"
        assert target.is_file()
        assert "class Target:" in target.read_text(encoding="utf-8")

    def test_output_option(self, cli_runner: CliRunner, offline_project: Path) -> None:
        result = cli_runner.invoke(cli, ["compile", "-o", "gen/cdp.py"])
        assert result.exit_code == 0, result.output
        assert (offline_project / "gen" / "cdp.py").is_file()
        assert not (offline_project / "out").exists()

    def test_dry_run(self, cli_runner: CliRunner, offline_project: Path) -> None:
        result = cli_runner.invoke(cli, ["compile", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "dry run" in result.output
        assert not (offline_project / "out").exists()

    def test_json_output(self, cli_runner: CliRunner, offline_project: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "compile", "--dry-run", "--commit", "abc"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["ok"] is True
        assert payload["data"]["commit"] == "abc"
        assert payload["data"]["offline"] is True
        assert payload["data"]["methods"] == 7

    def test_quiet_prints_path(self, cli_runner: CliRunner, offline_project: Path) -> None:
        result = cli_runner.invoke(cli, ["-q", "compile"])
        assert result.exit_code == 0, result.output
        expected = (offline_project / "out" / "protocol.py").resolve()
        assert result.output.strip() == str(expected)

    def test_schema_dir_without_config(
        self,
        cli_runner: CliRunner,
        schema_dir: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        work = tmp_path / "work"
        work.mkdir()
        monkeypatch.chdir(work)
        result = cli_runner.invoke(cli, ["compile", "--schema-dir", str(schema_dir)])
        assert result.exit_code == 0, result.output
        assert (work / "protocol.py").is_file()

    def test_schema_error_exits_1(self, cli_runner: CliRunner, offline_project: Path) -> None:
        (offline_project / "schema" / "js_protocol.json").write_text(
            '{"domains": []}', encoding="utf-8"
        )
        result = cli_runner.invoke(cli, ["compile"])
        assert result.exit_code == 1
        assert "ERROR" in result.output
        assert "DOM.resolveNode.object" in result.output
        assert not (offline_project / "out").exists()

    def test_missing_schema_exits_1(self, cli_runner: CliRunner, offline_project: Path) -> None:
        result = cli_runner.invoke(cli, ["compile", "--schema-dir", "nowhere"])
        assert result.exit_code == 1
        assert "Could not read schema" in result.output

    def test_unwritable_output_exits_1(
        self, cli_runner: CliRunner, offline_project: Path
    ) -> None:
        (offline_project / "out" / "protocol.py").mkdir(parents=True)
        result = cli_runner.invoke(cli, ["compile"])
        assert result.exit_code == 1
        assert "Could not write output" in result.output
        assert (offline_project / "out" / "protocol.py").is_dir()
