"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``.  Owns logging/telemetry setup, snapshot loading and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import click

from weir.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from weir.config.settings import WeirSettings
    from weir.infrastructure.graph.store import Weir
    from weir.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: WeirSettings) -> None:
        self.settings = settings

        from weir.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

        if settings.verbose:
            from weir.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout.  Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            self.fail(result)

    def fail(self, result: ServiceResult) -> NoReturn:
        click.echo(format_result(result, settings=self.output_settings), err=True)
        raise SystemExit(1)

    def load_graph(self, path: str | Path) -> Weir:
        """Load a snapshot, or emit the failure and exit 1."""
        from weir.services.export import ExportService

        weir, error = ExportService.try_load_json(Path(path))
        if error is not None:
            self.fail(error)
        assert weir is not None
        return weir

    def save_graph(self, weir: Weir, path: str | Path) -> ServiceResult:
        """Write *weir* to *path*; emits and exits 1 on failure."""
        from weir.services.export import ExportService

        result = ExportService(weir).export_json(
            Path(path), indent=self.settings.export.indent
        )
        if not result.ok:
            self.fail(result)
        return result
