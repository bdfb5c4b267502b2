"""Command: list matched documents and their slugs."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from fmrewrite.commands._base import examples_epilog, pattern_option, root_argument

if TYPE_CHECKING:
    from fmrewrite.commands._context import AppContext


@click.command(
    epilog=examples_epilog(
        "fmrewrite slugs .",
        'fmrewrite slugs site --pattern "_posts/*.md"',
        "fmrewrite -q slugs",
    ),
)
@root_argument
@pattern_option
@click.pass_obj
def slugs(app: AppContext, root: Path | None, pattern: str | None) -> None:
    """Show the slug each matching document resolves to."""
    from fmrewrite.services.slugs import SlugService

    app.emit(SlugService(app.settings).list_slugs(root, pattern=pattern))
