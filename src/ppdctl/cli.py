"""Root CLI group for ppdctl with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from ppdctl import __version__
from ppdctl.commands import register_commands
from ppdctl.commands._context import AppContext
from ppdctl.config.settings import ConfigError, PpdSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="ppdctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Catalog definition file (overrides [catalog] path).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    catalog_path: Path | None,
) -> None:
    """ppdctl — compose paperdolls from a catalog of slots and fragments."""
    overrides: dict[str, object] = {}
    if catalog_path is not None:
        overrides["catalog"] = {"path": catalog_path.resolve()}
    try:
        settings = PpdSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
            **overrides,
        )
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
