"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from gormlint.output.console import (
    create_console,
    get_output,
    style_for_class,
    style_for_severity,
)

if TYPE_CHECKING:
    from rich.console import Console

    from gormlint.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: one line per diagnostic, else ``OK: <op>``."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    diagnostics = result.diagnostics
    if diagnostics:
        return "\n".join(_quiet_line(d) for d in diagnostics)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _quiet_line(diag: dict[str, Any]) -> str:
    if "struct_name" in diag:
        location = f"{diag['struct_name']}.{diag['field_name']}"
        if diag.get("path"):
            location = f"{diag['path']}:{location}"
        return f"{location}: {diag['severity']}: {diag['message']}"
    start = diag["range"]["start"]
    return f"{start['line'] + 1}:{start['character'] + 1}: {diag['code']}: {diag['message']}"


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="gl.ok"), Text(f"  {result.op}", style="gl.op"))


def _field(console: Console, key: str, value: Any) -> None:
    line = Text(f"  {key}: ", style="gl.key")
    line.append(str(value), style="gl.path" if key in ("path", "uri") else "")
    console.print(line)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree."""
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
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {span_data.get('name', '?')}"
    details = {**(span_data.get("counts") or {}), **(span_data.get("annotations") or {})}
    if details:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in details.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="gl.error"), Text(f"  {result.op}", style="gl.op"), " — ", msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


def _severity_text(severity: str) -> Text:
    return Text(severity, style=style_for_severity(severity))


# ── Operation renderers ───────────────────────────────────────────────


def _render_lint(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Diagnostics grouped by file, then struct."""
    data = result.data
    diagnostics: list[dict[str, Any]] = data.get("diagnostics", [])
    files = data.get("files", [])

    if not diagnostics:
        console.print(
            f"[gl.ok]OK[/gl.ok]  No GORM tag problems found "
            f"({data.get('structs', 0)} structs in {len(files)} files)."
        )
        return

    by_path: dict[str, dict[str, list[dict[str, Any]]]] = {}
    for diag in diagnostics:
        structs = by_path.setdefault(str(diag.get("path", "")), {})
        structs.setdefault(diag["struct_name"], []).append(diag)

    for path, structs in by_path.items():
        if path:
            console.print(Text(path, style="gl.path"))
        for struct_name, items in structs.items():
            console.print(Text(f"  {struct_name}", style="gl.struct"))
            for diag in items:
                line = Text("    ")
                line.append_text(_severity_text(diag["severity"]))
                line.append(" ")
                line.append(diag["field_name"], style="gl.field")
                if diag.get("key"):
                    line.append(f" [{diag['key']}]", style="gl.tag")
                line.append(f": {diag['message']}")
                console.print(line)
                if verbose and diag.get("tag"):
                    console.print(Text(f"      tag: {diag['tag']}", style="dim"))

    summary = f"\n{data.get('error_count', 0)} errors, {data.get('warning_count', 0)} warnings"
    if data.get("truncated"):
        summary += " (truncated)"
    console.print(summary)


def _render_report(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Editor diagnostics as a table of ranges."""
    _status_line(console, result)
    _field(console, "uri", result.data.get("uri", ""))
    items: list[dict[str, Any]] = result.data.get("diagnostics", [])
    if not items:
        _field(console, "count", 0)
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Range", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Code", style="dim")
    table.add_column("Message")
    for item in items:
        start, end = item["range"]["start"], item["range"]["end"]
        severity = "error" if item["severity"] == 1 else "warning"
        table.add_row(
            f"{start['line']}:{start['character']}-{end['line']}:{end['character']}",
            _severity_text(severity),
            str(item.get("code", "")),
            str(item.get("message", "")),
        )
    console.print(table)


def _render_locate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    start, end = data["range"]["start"], data["range"]["end"]
    _field(console, "struct", data.get("struct", ""))
    _field(console, "field", data.get("field", ""))
    if data.get("key"):
        _field(console, "key", data["key"])
    _field(console, "range", f"{start['line']}:{start['character']}-{end['line']}:{end['character']}")
    _field(console, "text", data.get("text", ""))


def _render_keys(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Key", no_wrap=True)
    table.add_column("Class")
    for key_class, names in result.data.get("classes", {}).items():
        style = style_for_class(key_class)
        for name in names:
            table.add_row(name, Text(key_class, style=style))
    console.print(table)
    console.print(f"\n{result.data.get('count', 0)} keys")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "lint": _render_lint,
    "report": _render_report,
    "locate": _render_locate,
    "keys": _render_keys,
}
