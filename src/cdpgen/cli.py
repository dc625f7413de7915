"""Root CLI group for cdpgen with global flags and command registration."""

from __future__ import annotations

import click

from cdpgen import __version__
from cdpgen.commands import register_commands
from cdpgen.commands._base import CdpGroup
from cdpgen.commands._context import AppContext
from cdpgen.config.settings import CdpgenSettings


@click.group(
    cls=CdpGroup,
    invoke_without_command=True,
    examples="""\
  cdpgen compile
  cdpgen -v compile --offline
  cdpgen --json inspect
  cdpgen -c ci/cdpgen.toml compile --dry-run""",
)
@click.version_option(version=__version__, prog_name="cdpgen")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """cdpgen: compile the DevTools protocol schema into typed bindings."""
    ctx.ensure_object(dict)
    settings = CdpgenSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
