"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from cdpgen.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from cdpgen.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    if result.op == "compile":
        return str(result.data.get("output") or result.data.get("target", ""))
    domains = result.data.get("domains")
    if isinstance(domains, list):
        return "\n".join(str(d.get("name", "")) for d in domains)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="cdp.ok")
    op = Text(f"  {result.op}", style="cdp.op")
    console.print(Text.assemble(label, op))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="cdp.key")
    if key in ("output", "target", "path"):
        v = Text(str(value), style="cdp.path")
    elif key == "domain":
        v = Text(str(value), style="cdp.domain")
    elif isinstance(value, int) and not isinstance(value, bool):
        v = Text(str(value), style="cdp.count")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="cdp.error")
    op = Text(f"  {result.op}", style="cdp.op")
    console.print(Text.assemble(label, op, ": ", msg))

    if err and err.path:
        console.print(Text(f"  at {err.path}", style="cdp.path"))
    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for k, v in err.detail.items():
            if k != "path":
                console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_compile(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    if d.get("dry_run"):
        _field(console, "target", f"{d.get('target')} (dry run, not written)")
    else:
        _field(console, "output", d.get("output"))
    for key in ("version", "domains", "declarations", "methods", "events", "bytes"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    if verbose:
        _field(console, "commit", d.get("commit"))
        _field(console, "offline", d.get("offline"))
        _render_meta(console, result)


def _render_inspect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    if "declarations" in d and isinstance(d["declarations"], list):
        _render_inspect_domain(result, console, verbose=verbose)
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Domain", style="cdp.domain", no_wrap=True)
    table.add_column("Types", style="cdp.count", justify="right")
    table.add_column("Commands", style="cdp.count", justify="right")
    table.add_column("Events", style="cdp.count", justify="right")
    table.add_column("Imports", style="dim")
    for item in d.get("domains", []):
        table.add_row(
            str(item["name"]),
            str(item["types"]),
            str(item["commands"]),
            str(item["events"]),
            ", ".join(item["imports"]),
        )
    console.print(table)
    version = d.get("version") or "unversioned"
    console.print(f"\n{len(d.get('domains', []))} domains (protocol {version})")
    if verbose:
        _render_meta(console, result)


def _render_inspect_domain(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "domain", d["domain"])
    _field(console, "imports", ", ".join(d.get("imports", [])) or "-")

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Declaration", no_wrap=True)
    table.add_column("Kind")
    for decl in d["declarations"]:
        kind = str(decl["kind"])
        table.add_row(str(decl["name"]), Text(kind, style=style_for_kind(kind)))
    console.print(table)
    console.print(f"\n{d.get('count', len(d['declarations']))} declarations")
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "compile": _render_compile,
    "inspect": _render_inspect,
}
