"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from zonectl.output.console import create_console, get_output, short_sha

if TYPE_CHECKING:
    from rich.console import Console

    from zonectl.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode.

    Affected sets print one target id per line; zones print
    ``<zone> <head sha>`` per PR.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "zones":
        lines = [
            f"{zone['zone']} {member['head_sha']}"
            for zone in result.data.get("zones", [])
            for member in zone.get("members", [])
        ]
        return "\n".join(lines)

    items = result.data.get("items")
    if isinstance(items, list):
        ids = [str(item["id"]) for item in items if isinstance(item, dict) and "id" in item]
        return "\n".join(ids)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="zone.ok")
    op = Text(f"  {result.op}", style="zone.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="zone.key")
    if key.endswith("_sha"):
        v = Text(str(value), style="zone.sha")
    elif key in ("path", "key"):
        v = Text(str(value), style="dim")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


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
            console.print(f"    {k}: {escape(str(v))}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = escape(str(span_data.get("name", "?")))
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
        extras = ", ".join(f"{k}={v}" for k, v in annotations.items())
        line += f"  ({escape(extras)})"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _target_table(items: list[dict[str, Any]], new_names: set[str]) -> Table:
    """Build a Rich Table of affected targets."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Package", style="zone.name")
    table.add_column("Target ID", style="zone.id", no_wrap=True)
    table.add_column("")
    for item in items:
        name = str(item.get("name", ""))
        marker = Text("new", style="zone.new") if name in new_names else Text("")
        table.add_row(escape(name), escape(str(item.get("id", ""))), marker)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="zone.error")
    op = Text(f"  {result.op}", style="zone.op")
    console.print(label, op, Text(" — "), Text(msg))

    if err and err.code == "FETCH_FAILED":
        for sha in err.detail.get("failed_shas", []):
            reason = err.detail.get("errors", {}).get(sha, "")
            console.print(f"  [zone.sha]{escape(sha)}[/zone.sha]  {escape(reason)}")
    elif verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {escape(str(v))}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_affected(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the affected set as a table."""
    d = result.data
    items = d.get("items", [])
    new_names = set(d.get("new_packages", []))

    _status_line(console, result)
    _field(console, "baseline_sha", d.get("baseline_sha", ""))
    if d.get("head_shas"):
        _field(console, "head_shas", ", ".join(short_sha(s) for s in d["head_shas"]))
    _field(console, "direct_packages", ", ".join(d.get("direct_packages", [])) or "(none)")

    if items:
        console.print()
        console.print(_target_table(items, new_names))
    console.print(f"\n{d.get('count', len(items))} affected targets")
    if verbose:
        _render_meta(console, result)


def _render_zones(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render zones with their member PRs and the packages they share."""
    zones = result.data.get("zones", [])
    console.print(
        f"[bold]{result.data.get('count', len(zones))} zones[/bold]"
        f" ({result.data.get('serialized', 0)} serialized)"
    )

    for zone in zones:
        size = zone.get("size", 0)
        console.print(f"\n[bold]Zone {zone.get('zone', '?')}[/bold] ({size} PRs)")
        for member in zone.get("members", []):
            sha = escape(short_sha(str(member.get("head_sha", ""))))
            count = member.get("affected_count", 0)
            console.print(f"  [zone.sha]{sha}[/zone.sha]  {count} affected")
            if verbose:
                for name in member.get("affected", []):
                    console.print(f"      {escape(name)}")
        shared = zone.get("shared", [])
        if shared:
            console.print(f"  shared: {escape(', '.join(shared))}")

    if verbose:
        _render_meta(console, result)


def _render_dag_inspect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render DAG diagnostics."""
    d = result.data
    _status_line(console, result)
    for key in ("baseline_sha", "snapshots", "targets", "names", "edges"):
        if key in d:
            _field(console, key, d[key])

    unnamed = d.get("unnamed_ids", [])
    _field(console, "unnamed_ids", len(unnamed))
    if unnamed and verbose:
        for target_id in unnamed:
            console.print(f"    [zone.id]{escape(target_id)}[/zone.id]")

    aliases = d.get("aliases", {})
    if aliases:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Package", style="zone.name")
        table.add_column("Target IDs", style="zone.id")
        for name, ids in aliases.items():
            table.add_row(escape(name), escape(", ".join(ids)))
        console.print(table)

    cycle = d.get("cycle", [])
    if cycle:
        chain = escape(" -> ".join([*cycle, cycle[0]]))
        console.print(f"\n[zone.warning]cycle[/zone.warning]  {chain}")

    if verbose:
        _render_meta(console, result)


def _render_snapshot(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a snapshot summary (validate / convert / show)."""
    d = result.data
    _status_line(console, result)
    for key in ("path", "key", "mode", "version", "head_sha", "base_sha", "targets"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    target_ids = d.get("target_ids", [])
    _field(console, "target_ids", ", ".join(target_ids) or "(none)")
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "affected": _render_affected,
    "zones": _render_zones,
    "dag_inspect": _render_dag_inspect,
    "snapshot_validate": _render_snapshot,
    "snapshot_convert": _render_snapshot,
    "snapshot_show": _render_snapshot,
}
