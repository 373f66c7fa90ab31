"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy store/service construction and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enginectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from enginectl.config.settings import EngineSettings
    from enginectl.infrastructure.store import ConnectionStore
    from enginectl.services.connection import ConnectionService
    from enginectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The registry store is created on first use so ``--help`` and
    ``--version`` never touch the filesystem.
    """

    def __init__(self, settings: EngineSettings) -> None:
        self.settings = settings
        self._store: ConnectionStore | None = None

        from enginectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def store(self) -> ConnectionStore:
        """The connection registry store (created lazily on first access)."""
        if self._store is None:
            from enginectl.infrastructure.store import ConnectionStore

            self._store = ConnectionStore(self.settings.registry_path)
        return self._store

    def connections(self) -> ConnectionService:
        """A ConnectionService bound to this context's store and settings."""
        from enginectl.services.connection import ConnectionService

        return ConnectionService(self.store, self.settings)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
