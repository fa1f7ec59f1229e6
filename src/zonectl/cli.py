"""Root CLI group for zonectl with global flags and command registration."""

from __future__ import annotations

import click

from zonectl import __version__
from zonectl.commands import register_commands
from zonectl.commands._context import AppContext
from zonectl.config.settings import ZoneSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="zonectl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with timing info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--storage-root",
    type=click.Path(path_type=str),
    default=None,
    help="Directory holding cached snapshots (overrides [storage] root).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    storage_root: str | None,
) -> None:
    """zonectl — affected packages and merge-queue zones for monorepos."""
    ctx.ensure_object(dict)
    # Unset flags are passed as None so ZONECTL_* env vars still apply.
    settings = ZoneSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        storage_root=storage_root,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
