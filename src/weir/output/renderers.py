"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from weir.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from weir.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
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
    if result.op == "path":
        return " ".join(str(v) for v in result.data.get("vertices", []))
    for key in ("output", "path"):
        if key in result.data:
            return str(result.data[key])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="weir.ok"), Text(f"  {result.op}", style="weir.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="weir.key")
    if key == "path" or key == "output":
        v = Text(str(value), style="weir.path")
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        v = Text(str(value), style="weir.num")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
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


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
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

    extras: list[str] = []
    if span_data.get("commits"):
        extras.append(f"commits={span_data['commits']}")
        extras.append(f"alterations={span_data.get('alterations', 0)}")
    for ak, av in span_data.get("annotations", {}).items():
        extras.append(f"{ak}={av}")
    if extras:
        line += f"  ({', '.join(extras)})"

    console.print(line)
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="weir.error"),
        Text(f"  {result.op}{code}", style="weir.op"),
        Text(f"  {msg}"),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Graph renderers ───────────────────────────────────────────────────


def _render_stats(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    table = Table(show_header=False, pad_edge=False, box=None)
    table.add_column("key", style="weir.key")
    table.add_column("value", justify="right", style="weir.num")
    for key in ("dim", "vertices", "edges", "components", "total_length", "mean_degree"):
        table.add_row(key.replace("_", " "), str(d.get(key, "")))
    bbox = d.get("bbox")
    if bbox:
        lo, hi = bbox
        table.add_row("bbox", f"{_fmt_point(lo)} .. {_fmt_point(hi)}")
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _fmt_point(coords: list[float]) -> str:
    return "(" + ", ".join(f"{c:.3f}" for c in coords) + ")"


def _render_components(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Size", justify="right", style="weir.num")
    table.add_column("Vertices", style="weir.id")
    for i, comp in enumerate(items, 1):
        shown = comp if verbose or len(comp) <= 12 else [*comp[:12], "..."]
        table.add_row(str(i), str(len(comp)), " ".join(str(v) for v in shown))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} components")
    if verbose:
        _render_meta(console, result)


def _render_path(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render shortest path as a chain."""
    vertices = result.data.get("vertices", [])
    console.print(" → ".join(f"[weir.id]{v}[/weir.id]" for v in vertices))
    console.print(
        f"\nHops: {result.data.get('hops', 0)}  Length: {result.data.get('length', 0.0)}"
    )
    if verbose:
        _render_meta(console, result)


def _render_edge_change(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render spanning_tree / relative_neighborhood results."""
    _status_line(console, result)
    d = result.data
    for key in ("radius", "count", "added", "removed", "output"):
        if key in d:
            _field(console, key, d[key])
    if verbose:
        edges = d.get("edges", [])
        if edges:
            _field(console, "edges", " ".join(f"{a}-{b}" for a, b in edges))
        _render_meta(console, result)


def _render_grow(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("steps", "seed", "commits", "alterations", "vertices", "edges", "output"):
        if key in d:
            _field(console, key, d[key])
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "stats": _render_stats,
    "components": _render_components,
    "path": _render_path,
    "spanning_tree": _render_edge_change,
    "relative_neighborhood": _render_edge_change,
    "grow": _render_grow,
}
