"""Command: summarize the compiled declaration tree."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from cdpgen.commands._base import CdpCommand

if TYPE_CHECKING:
    from cdpgen.commands._context import AppContext


@click.command(
    "inspect",
    cls=CdpCommand,
    examples="""\
  cdpgen inspect
  cdpgen inspect --domain DOM
  cdpgen --json inspect --domain Target --offline""",
)
@click.option("-d", "--domain", default=None, help="Show the declarations of one domain.")
@click.option("--offline", is_flag=True, help="Read schema files from the local copy.")
@click.option(
    "--schema-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the schema files (implies --offline).",
)
@click.pass_obj
def inspect_cmd(
    app: AppContext,
    domain: str | None,
    offline: bool,
    schema_dir: Path | None,
) -> None:
    """Show domains, declarations, and cross-domain imports."""
    from cdpgen.services.compile import CompileService

    settings = app.settings.with_source(
        offline=True if (offline or schema_dir is not None) else None,
        local_dir=str(schema_dir.resolve()) if schema_dir is not None else None,
    )
    app.emit(CompileService(settings).inspect(domain=domain))
