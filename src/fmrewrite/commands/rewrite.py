"""Commands: batch front-matter rewrites (redirect, add-field)."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

import click

from fmrewrite.commands._base import examples_epilog, pattern_option, root_argument, write_options

if TYPE_CHECKING:
    from fmrewrite.commands._context import AppContext

_KEY_RE = re.compile(r"[A-Za-z_][\w.-]*")


def _check_key(_ctx: click.Context, _param: click.Parameter, value: str) -> str:
    if not _KEY_RE.fullmatch(value):
        raise click.BadParameter(f"{value!r} is not a plain top-level key")
    return value


def _check_template(_ctx: click.Context, _param: click.Parameter, value: str) -> str:
    try:
        value.format(slug="slug")
    except (KeyError, IndexError, ValueError) as exc:
        msg = f"only the {{slug}} placeholder is supported ({exc!r})"
        raise click.BadParameter(msg) from exc
    return value


@click.command(
    epilog=examples_epilog(
        "fmrewrite redirect . --base-url https://blog.example.com",
        "fmrewrite redirect site --base-url https://new.example.com --dry-run",
        'fmrewrite redirect --field redirect_from --pattern "docs/**/*.md" --backup',
        "fmrewrite --json redirect . --base-url https://blog.example.com",
    ),
)
@root_argument
@click.option("--base-url", default=None, help="Target site URL; the slug is appended.")
@click.option(
    "--field", "field_name", default=None, help="Header key to add (default redirect_to)."
)
@pattern_option
@write_options
@click.pass_obj
def redirect(
    app: AppContext,
    root: Path | None,
    base_url: str | None,
    field_name: str | None,
    pattern: str | None,
    dry_run: bool,
    backup: bool,
) -> None:
    """Add a redirect to <base-url>/<slug> in every matching document."""
    from fmrewrite.services.rewrite import RewriteService

    svc = RewriteService(app.settings)
    result = svc.redirect(
        root,
        base_url=base_url,
        field_name=field_name,
        pattern=pattern,
        dry_run=dry_run,
        backup=backup,
    )
    app.emit(result, fail_on_skipped=True)


@click.command(
    "add-field",
    epilog=examples_epilog(
        'fmrewrite add-field permalink "/blog/{slug}/" .',
        'fmrewrite add-field canonical_url "https://example.com/{slug}" --dry-run',
        "fmrewrite add-field layout post --pattern '_drafts/*.md'",
    ),
)
@click.argument("key", callback=_check_key)
@click.argument("template", callback=_check_template)
@root_argument
@pattern_option
@write_options
@click.pass_obj
def add_field(
    app: AppContext,
    key: str,
    template: str,
    root: Path | None,
    pattern: str | None,
    dry_run: bool,
    backup: bool,
) -> None:
    """Add KEY: TEMPLATE to every matching document; {slug} is filled in."""
    from fmrewrite.services.rewrite import RewriteService

    svc = RewriteService(app.settings)
    result = svc.add_field(
        key,
        template,
        root,
        pattern=pattern,
        dry_run=dry_run,
        backup=backup,
    )
    app.emit(result, fail_on_skipped=True)
