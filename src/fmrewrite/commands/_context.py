"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides service construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fmrewrite.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from fmrewrite.config.settings import FmSettings
    from fmrewrite.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.
    """

    def __init__(self, settings: FmSettings) -> None:
        self.settings = settings

        from fmrewrite.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: ServiceResult, *, fail_on_skipped: bool = False) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout.
          Warnings are emitted to stderr so they don't pollute piped output.
          With *fail_on_skipped*, a result listing skipped documents still
          prints to stdout but exits with code 1.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            if fail_on_skipped and result.data.get("skipped"):
                raise SystemExit(1)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
