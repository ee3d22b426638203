"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy executor initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mqtopo.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from mqtopo.config.settings import MqtopoSettings
    from mqtopo.infrastructure.graph.executor import QueryExecutor
    from mqtopo.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The executor is created lazily on first use so ``--help`` and
    ``channel-type`` never open a driver. Tests inject a fake through
    *executor*.
    """

    def __init__(self, settings: MqtopoSettings, *, executor: QueryExecutor | None = None) -> None:
        self.settings = settings
        self._executor = executor

        from mqtopo.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from mqtopo.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def executor(self) -> QueryExecutor:
        """The query executor (created lazily on first access)."""
        if self._executor is None:
            from mqtopo.infrastructure.graph.neo4j_store import Neo4jExecutor

            self._executor = Neo4jExecutor(self.settings.neo4j)
        return self._executor

    def close(self) -> None:
        close = getattr(self._executor, "close", None)
        if close is not None:
            close()

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
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
