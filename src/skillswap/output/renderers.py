"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from skillswap.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from skillswap.services.result import ServiceResult


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
        return f"ERROR: {result.op} - {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if isinstance(item, dict))
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="ss.ok")
    op = Text(f"  {result.op}", style="ss.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="ss.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="ss.id")
    elif key == "name":
        v = Text(str(value), style="ss.name")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    elif isinstance(value, (list, tuple)):
        v = Text(", ".join(str(x) for x in value))
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult, *, verbose: bool = False) -> None:
    """Print the telemetry span tree (verbose only)."""
    if verbose and result.meta:
        console.print()
        console.print(Text("  meta:", style="dim"))
        telemetry = result.meta.get("telemetry")
        if telemetry:
            _render_telemetry_tree(console, telemetry, indent=4)


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
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
    code = err.code if err else "ERROR"
    label = Text("ERROR", style="ss.error")
    op = Text(f"  {result.op}", style="ss.op")
    console.print(label, op, Text(f" [{code}] "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Profile renderers ─────────────────────────────────────────────────


def _render_profile(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("id", "name", "email", "bio", "skills_teach", "skills_learn"):
        if d.get(key):
            _field(console, key, d[key])
    _field(console, "rating", f"{float(d.get('rating', 0.0)):.2f}")
    _field(console, "swaps_done", d.get("swaps_done", 0))
    if "fields_changed" in d:
        _field(console, "fields_changed", d["fields_changed"])
    _render_meta(console, result, verbose=verbose)


# ── Feed renderers ────────────────────────────────────────────────────


def _render_feed(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        console.print("  No users found.")
        _render_meta(console, result, verbose=verbose)
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="ss.id", no_wrap=True)
    table.add_column("Name", style="ss.name")
    table.add_column("Overlap", style="ss.score", justify="right")
    table.add_column("Rating", justify="right")
    table.add_column("Swaps", justify="right")
    table.add_column("Teaches")
    for item in items:
        table.add_row(
            str(item["id"]),
            str(item.get("name", "")),
            str(item["overlap"]),
            f"{float(item.get('rating') or 0.0):.2f}",
            str(item.get("swaps_done", 0)),
            ", ".join(item.get("skills_teach", [])),
        )
    console.print(table)
    _render_meta(console, result, verbose=verbose)


# ── Swap renderers ────────────────────────────────────────────────────


def _render_swap(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    keys = (
        "id",
        "status",
        "sender_id",
        "receiver_id",
        "skill_offered",
        "skill_requested",
        "created_at",
    )
    for key in keys:
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose and result.data.get("updated_at"):
        _field(console, "updated_at", result.data["updated_at"])
    _render_meta(console, result, verbose=verbose)


def _render_swap_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        console.print("  No swaps found.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="ss.id", no_wrap=True)
    table.add_column("Status")
    table.add_column("Sender", no_wrap=True)
    table.add_column("Receiver", no_wrap=True)
    table.add_column("Offered")
    table.add_column("Requested")
    if verbose:
        table.add_column("Created", style="dim")
    for item in items:
        status = str(item["status"])
        row = [
            str(item["id"]),
            Text(status, style=style_for_status(status)),
            str(item["sender_id"]),
            str(item["receiver_id"]),
            str(item["skill_offered"]),
            str(item["skill_requested"]),
        ]
        if verbose:
            row.append(str(item.get("created_at", "")))
        table.add_row(*row)
    console.print(table)
    _render_meta(console, result, verbose=verbose)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    _render_meta(console, result, verbose=verbose)


_OP_RENDERERS = {
    "register_user": _render_profile,
    "get_profile": _render_profile,
    "update_profile": _render_profile,
    "list_feed": _render_feed,
    "list_matches": _render_feed,
    "request_swap": _render_swap,
    "respond_swap": _render_swap,
    "complete_swap": _render_swap,
    "get_swap": _render_swap,
    "list_swaps": _render_swap_list,
}
