"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``.  Provides lazy service construction (plugins load on
first use) and centralized result emission (stdout/stderr + exit codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from gormlint.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from gormlint.config.settings import GormlintSettings
    from gormlint.plugins.manager import PluginManager
    from gormlint.services.lint import LintService
    from gormlint.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Plugins and the service are created on first access so ``--help`` and
    ``--examples`` never import plugin code.
    """

    def __init__(self, settings: GormlintSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None
        self._service: LintService | None = None

        from gormlint.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from gormlint.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def plugins(self) -> PluginManager | None:
        """Loaded plugin manager, or None when ``[plugins] enabled = false``."""
        if self._plugins is None and self.settings.plugins.enabled:
            from gormlint.plugins.manager import PluginManager

            manager = PluginManager()
            local_dir = self.settings.project_root / self.settings.plugins.local_dir
            names = manager.discover_and_load(local_dir=local_dir)
            logger.debug("Plugins loaded: %s", names)
            self._plugins = manager
        return self._plugins

    @property
    def service(self) -> LintService:
        if self._service is None:
            from gormlint.services.lint import LintService

            self._service = LintService(self.settings, plugins=self.plugins)
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): stdout, warnings to stderr.
        * Failure: stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON already carries warnings in the payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
