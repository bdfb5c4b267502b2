"""Shared Click parameters for the document commands.

``redirect``, ``add-field`` and ``slugs`` all take an optional ROOT and a
``--pattern`` glob, and the two rewriting commands add ``--dry-run`` and
``--backup``. Each is declared once here as a decorator so the commands
agree on names, defaults, and validation.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from fmrewrite.infrastructure.filesystem import pattern_problem

F = TypeVar("F", bound=Callable[..., Any])


def _check_pattern(_ctx: click.Context, _param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return None
    problem = pattern_problem(value)
    if problem:
        raise click.BadParameter(problem)
    return value


def root_argument(f: F) -> F:
    """Optional ROOT directory; the configured ``[rewrite] root`` otherwise."""
    return click.argument(
        "root",
        required=False,
        type=click.Path(path_type=Path, file_okay=False),
    )(f)


def pattern_option(f: F) -> F:
    """``--pattern GLOB`` relative to ROOT, rejected early when unusable."""
    return click.option(
        "--pattern",
        default=None,
        callback=_check_pattern,
        help="Glob of documents under ROOT (default: [rewrite] pattern).",
    )(f)


def write_options(f: F) -> F:
    """``--dry-run`` and ``--backup`` for commands that modify documents."""
    f = click.option("--backup", is_flag=True, help="Copy each document before rewriting it.")(f)
    f = click.option("--dry-run", is_flag=True, help="Show the changes without writing.")(f)
    return f


def examples_epilog(*examples: str) -> str:
    """Format usage examples as a ``--help`` epilog Click will not rewrap."""
    body = "\n".join(f"  {line}" for line in examples)
    return f"\b\nExamples:\n{body}"
