"""Rich Console factory and theme for cdpgen output.

Consoles render into a StringIO buffer so formatters keep a plain
``str`` return contract. Rich drops color codes when no terminal is
attached (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CDP_THEME = Theme(
    {
        "cdp.ok": "bold green",
        "cdp.error": "bold red",
        "cdp.warning": "bold yellow",
        "cdp.op": "bold cyan",
        "cdp.key": "dim",
        "cdp.domain": "bold blue",
        "cdp.path": "dim",
        "cdp.count": "magenta",
        "cdp.kind.alias": "cyan",
        "cdp.kind.enum": "yellow",
        "cdp.kind.object": "green",
        "cdp.kind.method": "blue",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=CDP_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Return the Rich style name for a declaration kind."""
    return f"cdp.kind.{kind}" if kind in ("alias", "enum", "object", "method") else ""
