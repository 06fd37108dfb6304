"""Root CLI group for pvectl with global flags and command registration."""

from __future__ import annotations

import click
from pydantic import ValidationError

from pvectl import __version__
from pvectl.commands import register_commands
from pvectl.commands._context import AppContext
from pvectl.config.settings import ConfigurationError, PveSettings


def _settings_error(exc: ValidationError) -> click.ClickException:
    lines = ["Invalid configuration:"]
    for error in exc.errors(include_url=False):
        path = ".".join(str(part) for part in error["loc"]) or "(settings)"
        lines.append(f"  {path}: {error['msg']}")
    return click.ClickException("\n".join(lines))


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="pvectl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--allow-elevated",
    is_flag=True,
    help="Permit mutating commands (overrides [permissions] allow_elevated).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    allow_elevated: bool,
) -> None:
    """pvectl — Proxmox VE command dispatch and MCP server."""
    ctx.ensure_object(dict)
    overrides: dict[str, object] = {}
    if allow_elevated:
        overrides["permissions"] = {"allow_elevated": True}
    try:
        settings = PveSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            verbose=verbose,
            log_json=log_json,
            **overrides,
        )
    except ValidationError as exc:
        raise _settings_error(exc) from exc
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
