"""Subcommand modules for cdpgen.

register_commands() uses deferred imports to keep ``cdpgen --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from cdpgen.commands.compile import compile_cmd
    from cdpgen.commands.inspect_cmd import inspect_cmd

    cli.add_command(compile_cmd)
    cli.add_command(inspect_cmd)
