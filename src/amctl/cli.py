"""Root CLI group for amctl with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from amctl import __version__
from amctl.commands import register_commands
from amctl.commands._base import AmGroup
from amctl.commands._context import AppContext
from amctl.config.settings import AmSettings


@click.group(cls=AmGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="amctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the IPC directory (default: $HOME).",
)
@click.option("--sync", is_flag=True, help="Run plugin notification hooks inline.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    home: Path | None,
    sync: bool,
) -> None:
    """amctl — foreground command bridge."""
    try:
        settings = AmSettings.from_cli(
            config_path=config_path,
            home=home,
            json_output=json_output,
            verbose=verbose,
            log_json=log_json,
            sync=sync,
        )
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
