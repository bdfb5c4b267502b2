"""Root CLI group for fmrewrite with global flags and command registration."""

from __future__ import annotations

import click

from fmrewrite import __version__
from fmrewrite.commands import register_commands
from fmrewrite.commands._base import examples_epilog
from fmrewrite.commands._context import AppContext
from fmrewrite.config.settings import FmSettings


@click.group(
    invoke_without_command=True,
    epilog=examples_epilog(
        "fmrewrite slugs",
        "fmrewrite redirect --base-url https://blog.example.com --dry-run",
        "fmrewrite -v redirect --base-url https://blog.example.com --backup",
    ),
)
@click.version_option(version=__version__, prog_name="fmrewrite")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """fmrewrite — batch front-matter rewriter for static-site content."""
    settings = FmSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
