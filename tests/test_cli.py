"""Tests for the root cdpgen CLI."""

from pathlib import Path

from click.testing import CliRunner

from cdpgen import __version__
from cdpgen.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "cdpgen" in result.output
    assert "compile" in result.output
    assert "inspect" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


def test_global_flags_accepted(cli_runner: CliRunner) -> None:
    for flag in ("--json", "-q", "-v", "--log-json"):
        result = cli_runner.invoke(cli, [flag, "--version"])
        assert result.exit_code == 0, flag


def test_config_option(cli_runner: CliRunner, tmp_path: Path, schema_dir: Path) -> None:
    config = tmp_path / "ci.toml"
    config.write_text(
        f'[source]\noffline = true\nlocal_dir = "{schema_dir.as_posix()}"\n', encoding="utf-8"
    )
    result = cli_runner.invoke(cli, ["-q", "-c", str(config), "inspect"])
    assert result.exit_code == 0, result.output
    assert "DOM" in result.output.split()


def test_verbose_shows_telemetry(cli_runner: CliRunner, offline_project: Path) -> None:
    result = cli_runner.invoke(cli, ["-v", "compile", "--dry-run"])
    assert result.exit_code == 0, result.output
    assert "CompileService.compile" in result.output
    assert "commit:" in result.output


def test_invalid_config(cli_runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "bad.toml"
    config.write_text("[source\n", encoding="utf-8")
    result = cli_runner.invoke(cli, ["-c", str(config), "inspect"])
    assert result.exit_code != 0
    assert "Invalid TOML" in result.output
