"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. The catalog and store are built lazily so
``--help`` and ``--version`` never touch the catalog file.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ppdctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from ppdctl.config.settings import PpdSettings
    from ppdctl.domain.catalog import Catalog
    from ppdctl.services.result import ServiceResult
    from ppdctl.services.store import PaperdollStore


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: PpdSettings) -> None:
        self.settings = settings
        self._catalog: Catalog | None = None
        self._store: PaperdollStore | None = None

        from ppdctl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

    @property
    def catalog(self) -> Catalog:
        """The catalog loaded from the configured path (loaded on first access)."""
        if self._catalog is None:
            from ppdctl.infrastructure.loader import CatalogLoadError, load_catalog

            path = self.settings.catalog_path
            if path is None:
                msg = "No catalog configured. Pass --catalog or set [catalog] path in ppdctl.toml."
                raise click.UsageError(msg)
            try:
                self._catalog = load_catalog(path)
            except CatalogLoadError as exc:
                raise click.ClickException(str(exc)) from exc
        return self._catalog

    @property
    def store(self) -> PaperdollStore:
        """The paperdoll store (created on first access)."""
        if self._store is None:
            from ppdctl.domain.ids import IdAllocator
            from ppdctl.plugins.manager import PluginManager
            from ppdctl.services.store import PaperdollStore

            plugin_manager: PluginManager | None = None
            if self.settings.plugins.enabled:
                plugin_manager = PluginManager()
                plugin_manager.discover_and_load()

            self._store = PaperdollStore(
                self.catalog,
                allocator=IdAllocator(self.settings.store.first_id),
                plugin_manager=plugin_manager,
                retain_on_render_failure=self.settings.render.on_failure == "retain",
            )
        return self._store

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr outside JSON mode.
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
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
