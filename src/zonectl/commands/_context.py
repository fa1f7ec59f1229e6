"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Opens the snapshot store lazily and centralizes
result emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from zonectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from zonectl.config.settings import ZoneSettings
    from zonectl.infrastructure.store import SnapshotStore
    from zonectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is created on first use so ``--help`` and ``--version``
    never touch the storage directory.
    """

    def __init__(self, settings: ZoneSettings) -> None:
        self.settings = settings
        self._store: SnapshotStore | None = None

        from zonectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from zonectl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> SnapshotStore:
        """The snapshot store (created lazily on first access)."""
        if self._store is None:
            from zonectl.infrastructure.store import SnapshotStore

            self._store = SnapshotStore.from_settings(self.settings)
        return self._store

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so piped
          output stays clean.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON output already carries the warnings.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
