"""Rich Console factory and theme for fmrewrite output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

FM_THEME = Theme(
    {
        "fm.ok": "bold green",
        "fm.error": "bold red",
        "fm.warning": "bold yellow",
        "fm.op": "bold cyan",
        "fm.key": "dim",
        "fm.path": "bold",
        "fm.slug": "bold blue",
        "fm.status.rewritten": "green",
        "fm.status.would-rewrite": "cyan",
        "fm.status.unchanged": "dim",
        "fm.status.skipped": "red",
        "fm.diff.add": "green",
        "fm.diff.remove": "red",
        "fm.diff.hunk": "magenta",
    }
)


def create_console() -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=FM_THEME,
        highlight=False,
        width=120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a document status."""
    return f"fm.status.{status}"
