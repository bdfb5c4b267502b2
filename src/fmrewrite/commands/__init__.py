"""Subcommand modules for fmrewrite.

Provides register_commands() which uses deferred imports to keep
``fmrewrite --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from fmrewrite.commands.rewrite import add_field, redirect
    from fmrewrite.commands.slugs import slugs

    cli.add_command(redirect)
    cli.add_command(add_field)
    cli.add_command(slugs)
