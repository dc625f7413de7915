"""Click base classes for cdpgen commands.

``cdpgen`` and its subcommands take an ``examples=`` text. It is kept out
of ``--help`` and printed, dedented, by an eager ``--examples`` flag.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


class _ExamplesMixin:
    """Adds ``--examples`` to any Click command that was given examples."""

    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = textwrap.dedent(examples).strip("\n") if examples else None
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or not self.examples:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class CdpCommand(_ExamplesMixin, click.Command):
    """A ``cdpgen`` subcommand."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class CdpGroup(_ExamplesMixin, click.Group):
    """The ``cdpgen`` root group; its subcommands default to :class:`CdpCommand`."""

    command_class = CdpCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
