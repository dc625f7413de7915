"""Command: compile the protocol schema into a Python module."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from cdpgen.commands._base import CdpCommand

if TYPE_CHECKING:
    from cdpgen.commands._context import AppContext


@click.command(
    "compile",
    cls=CdpCommand,
    examples="""\
  cdpgen compile
  cdpgen compile --output src/myclient/protocol.py
  cdpgen compile --offline --schema-dir vendor/devtools-protocol/json
  cdpgen compile --commit 15f524c8f5ce5b317ddcdf5e6f875d6eb8bdac88 --dry-run
  cdpgen --json compile --dry-run""",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the module here instead of [output] path.",
)
@click.option("--offline", is_flag=True, help="Read schema files from the local copy.")
@click.option(
    "--schema-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the schema files (implies --offline).",
)
@click.option("--commit", default=None, help="Upstream commit to fetch the schema from.")
@click.option("--dry-run", is_flag=True, help="Compile and render without writing.")
@click.pass_obj
def compile_cmd(
    app: AppContext,
    output: Path | None,
    offline: bool,
    schema_dir: Path | None,
    commit: str | None,
    dry_run: bool,
) -> None:
    """Compile the protocol schema into typed Python bindings."""
    from cdpgen.services.compile import CompileService

    settings = app.settings.with_source(
        offline=True if (offline or schema_dir is not None) else None,
        local_dir=str(schema_dir.resolve()) if schema_dir is not None else None,
        commit=commit,
    )
    svc = CompileService(settings)
    app.emit(svc.compile(output=output, dry_run=dry_run))
