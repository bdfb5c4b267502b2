"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.

Paths and diff lines are always wrapped in :class:`Text` so square
brackets in filenames are never parsed as Rich markup.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.text import Text

from fmrewrite.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from fmrewrite.services.result import ServiceResult

_STATUS_WIDTH = len("would-rewrite")


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

    Rewrites list the processed paths, slug listings list the slugs.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "rewrite":
        return "\n".join(result.data.get("processed", []))
    if result.op == "slugs":
        return "\n".join(item["slug"] for item in result.data.get("items", []))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="fm.ok")
    op = Text(f"  {result.op}", style="fm.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}:", style="fm.key")
    v = Text(str(value))
    console.print(k, v, end="", soft_wrap=True)
    console.print()


def _document_line(console: Console, status: str, path: str, reason: str | None = None) -> None:
    """Print ``  <status>  <path>[ — reason]`` for one document."""
    line = Text("  ")
    line.append(f"{status:<{_STATUS_WIDTH}}", style=style_for_status(status))
    line.append("  ")
    line.append(path, style="fm.path")
    if reason:
        line.append(f" — {reason}")
    console.print(line, soft_wrap=True)


def _render_diff(console: Console, diff: str) -> None:
    for raw in diff.splitlines():
        if raw.startswith(("+++", "---")):
            style = "bold"
        elif raw.startswith("@@"):
            style = "fm.diff.hunk"
        elif raw.startswith("+"):
            style = "fm.diff.add"
        elif raw.startswith("-"):
            style = "fm.diff.remove"
        else:
            style = ""
        console.print(Text(f"    {raw}", style=style), soft_wrap=True)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="fm.error")
    op = Text(f"  {result.op}", style="fm.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg), soft_wrap=True)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Rewrite renderers ─────────────────────────────────────────────────


def _render_rewrite(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a batch rewrite: one line per document, then the summary."""
    d = result.data
    dry_run = d.get("dry_run", False)
    status = "would-rewrite" if dry_run else "rewritten"
    diffs: dict[str, str] = d.get("diffs", {})

    _status_line(console, result)
    for path in d.get("processed", []):
        _document_line(console, status, path)
        if dry_run and path in diffs:
            _render_diff(console, diffs[path])
    if verbose:
        for path in d.get("unchanged", []):
            _document_line(console, "unchanged", path)

    skipped = d.get("skipped", [])
    console.print()
    _field(console, "would_rewrite" if dry_run else "processed", d.get("processed_count", 0))
    _field(console, "unchanged", len(d.get("unchanged", [])))
    _field(console, "skipped", len(skipped))
    if d.get("backup_suffix"):
        _field(console, "backup_suffix", d["backup_suffix"])

    if skipped:
        console.print()
        console.print(Text("  skipped documents:", style="fm.warning"))
        for item in skipped:
            _document_line(console, "skipped", item["path"], item["reason"])

    if verbose:
        _render_meta(console, result)


def _render_slugs(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render ``path -> slug`` pairs, flagging collisions."""
    d = result.data
    colliding = {path for members in d.get("collisions", {}).values() for path in members}

    _status_line(console, result)
    for item in d.get("items", []):
        line = Text("  ")
        line.append(item["path"], style="fm.path")
        line.append("  ->  ")
        line.append(item["slug"], style="fm.slug")
        if item["path"] in colliding:
            line.append("  (collision)", style="fm.warning")
        console.print(line, soft_wrap=True)
    console.print()
    _field(console, "count", d.get("count", 0))
    _field(console, "collisions", len(d.get("collisions", {})))


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
    "rewrite": _render_rewrite,
    "slugs": _render_slugs,
}
