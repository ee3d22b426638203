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

from mqtopo.domain.types import ChannelType, ReposType
from mqtopo.output.console import create_console, get_output, style_for_repos

if TYPE_CHECKING:
    from rich.console import Console

    from mqtopo.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode: one line per entity."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "run_query":
        lines = [f"qm {qm['id']} {qm['name']}" for qm in result.data.get("queuemanagers", [])]
        lines += [f"app {app['id']} {app['name']}" for app in result.data.get("applications", [])]
        lines += [
            f"conn {c['id']} {c['startId']}->{c['endId']}"
            for c in result.data.get("connections", [])
        ]
        return "\n".join(lines)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="mq.ok")
    op = Text(f"  {result.op}", style="mq.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="mq.key")
    v = Text(str(value), style="mq.id" if key == "id" else "")
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
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _repos_label(code: int) -> str:
    try:
        return ReposType(code).name.title()
    except ValueError:
        return str(code)


def _channel_label(code: int) -> str:
    try:
        return ChannelType(code).name
    except ValueError:
        return str(code)


# ── Snapshot tables ───────────────────────────────────────────────────


def _queue_manager_table(items: list[dict[str, Any]], *, verbose: bool) -> Table:
    table = Table(title="Queue managers", show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="mq.id", no_wrap=True)
    table.add_column("QMID", justify="right")
    table.add_column("Name", style="mq.name")
    table.add_column("Repos")
    table.add_column("Host")
    table.add_column("Layer", style="mq.layer", justify="right")
    if verbose:
        table.add_column("Host2")
        table.add_column("Multi", justify="right")
        table.add_column("Decom", justify="right")

    for qm in items:
        repos = int(qm.get("repos", ReposType.UNKNOWN))
        row: list[str | Text] = [
            str(qm["id"]),
            str(qm["qmgrid"]),
            qm["name"],
            Text(_repos_label(repos), style=style_for_repos(repos)),
            qm["host"],
            str(qm["layer"]),
        ]
        if verbose:
            row += [qm.get("host2", ""), str(qm.get("multi", 0)), str(qm.get("decom", 0))]
        table.add_row(*row)
    return table


def _application_table(items: list[dict[str, Any]]) -> Table:
    table = Table(title="Applications", show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="mq.id", no_wrap=True)
    table.add_column("App ID", justify="right")
    table.add_column("Name", style="mq.name")
    table.add_column("Owner")
    table.add_column("Layer", style="mq.layer", justify="right")
    for app in items:
        table.add_row(
            str(app["id"]), str(app["appid"]), app["name"], app["owner"], str(app["layer"])
        )
    return table


def _connection_table(items: list[dict[str, Any]]) -> Table:
    table = Table(title="Connections", show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="mq.id", no_wrap=True)
    table.add_column("Channel")
    table.add_column("Type")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    for conn in items:
        table.add_row(
            str(conn["id"]),
            conn["channelName"],
            _channel_label(int(conn["channelType"])),
            str(conn["startId"]),
            str(conn["endId"]),
        )
    return table


def _has_entities(data: dict[str, Any]) -> bool:
    return any(data.get(k) for k in ("queuemanagers", "applications", "connections"))


def _render_snapshot_tables(console: Console, data: dict[str, Any], *, verbose: bool) -> None:
    qms = data.get("queuemanagers", [])
    apps = data.get("applications", [])
    conns = data.get("connections", [])
    if qms:
        console.print(_queue_manager_table(qms, verbose=verbose))
    if apps:
        console.print(_application_table(apps))
    if conns:
        console.print(_connection_table(conns))


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="mq.error")
    op = Text(f"  {result.op}", style="mq.op")
    console.print(label, op, Text(" — "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")

    if result.op == "run_query" and _has_entities(result.data):
        console.print(Text("  partial snapshot:", style="dim"))
        _render_snapshot_tables(console, result.data, verbose=verbose)


def _render_snapshot(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "queuemanagers", len(data.get("queuemanagers", [])))
    _field(console, "applications", len(data.get("applications", [])))
    _field(console, "connections", len(data.get("connections", [])))
    if result.meta and "layers" in result.meta:
        _field(console, "layers", result.meta["layers"])
    console.print()
    _render_snapshot_tables(console, data, verbose=verbose)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "run_query": _render_snapshot,
}
