"""tools — list, describe, document, and call registry commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from pvectl.commands._base import PveGroup, registry_examples
from pvectl.domain.commands import CommandCategory

if TYPE_CHECKING:
    from pvectl.commands._context import AppContext


def _parse_assignment(raw: str) -> tuple[str, Any]:
    """Split ``key=value``; the value is read as JSON when it parses, else kept as text."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected key=value, got {raw!r}", param_hint="-a/--arg")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


@click.group(
    cls=PveGroup,
    examples="""\
  pvectl tools list
  pvectl tools list --category guests
  pvectl tools describe proxmox_pool
  pvectl tools call proxmox_get_nodes
  pvectl tools call proxmox_pool -a action=get -a poolid=dev
  pvectl --allow-elevated tools call proxmox_pool --args '{"action": "create", "poolid": "dev"}'
  pvectl tools docs --output COMMANDS.md""",
)
def tools() -> None:
    """Inspect and invoke the command registry."""


@tools.command("list")
@click.option(
    "--category",
    type=click.Choice([c.value for c in CommandCategory]),
    default=None,
    help="Only commands in this category.",
)
@click.pass_obj
def list_cmd(app: AppContext, category: str | None) -> None:
    """List every command with its access level and actions."""
    from pvectl.output.formatters import format_json
    from pvectl.output.renderers import render_command_table
    from pvectl.services.dispatch import describe_registry

    entries = describe_registry(app.registry, category=category)
    if app.settings.json_output:
        click.echo(format_json(entries))
    else:
        click.echo(render_command_table(entries))


@tools.command()
@click.argument("name")
@click.pass_obj
def describe(app: AppContext, name: str) -> None:
    """Print the input JSON schema of command NAME."""
    from pvectl.output.formatters import format_json

    descriptor = app.registry.get(name)
    if descriptor is None:
        raise click.ClickException(f'Unknown command "{name}". Run "pvectl tools list".')
    click.echo(format_json(descriptor.input_schema()))


_CALL_EXAMPLES = """\
  pvectl tools call proxmox_guest_list -a type=lxc
  pvectl tools call proxmox_guest_status -a type=vm -a node=pve1 -a vmid=100
  pvectl --json tools call proxmox_node_disk --args '{"action": "list", "node": "pve1"}'
"""


def _call_examples() -> str:
    return f"{_CALL_EXAMPLES}\n{registry_examples()}"


@tools.command(examples=_call_examples)
@click.argument("name")
@click.option("--args", "args_json", default=None, help="Arguments as a JSON object.")
@click.option(
    "-a",
    "--arg",
    "assignments",
    multiple=True,
    help="One argument as key=value (repeatable; overrides --args).",
)
@click.pass_obj
def call(app: AppContext, name: str, args_json: str | None, assignments: tuple[str, ...]) -> None:
    """Invoke command NAME through the dispatcher."""
    arguments: Any = {}
    if args_json is not None:
        try:
            arguments = json.loads(args_json)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(f"invalid JSON: {exc}", param_hint="--args") from exc
    if assignments:
        if not isinstance(arguments, dict):
            raise click.BadParameter("cannot combine -a with a non-object --args", param_hint="-a")
        arguments = {**arguments, **dict(_parse_assignment(raw) for raw in assignments)}
    app.emit(app.dispatcher.invoke(name, arguments))


@tools.command()
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the reference to a file instead of stdout.",
)
@click.pass_obj
def docs(app: AppContext, output_path: str | None) -> None:
    """Render a markdown reference of every command."""
    from pathlib import Path

    from pvectl.output.renderers import render_command_docs
    from pvectl.services.dispatch import describe_registry

    text = render_command_docs(describe_registry(app.registry))
    if output_path is None:
        click.echo(text, nl=False)
        return
    Path(output_path).write_text(text, encoding="utf-8")
    click.echo(f"Wrote {output_path}")
