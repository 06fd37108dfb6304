"""Command: verify the command registry and the connection settings."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from pvectl.commands._base import PveCommand

if TYPE_CHECKING:
    from pvectl.commands._context import AppContext


@click.command(
    cls=PveCommand,
    examples="""\
  pvectl check
  pvectl --json check
  PVECTL_CONFIG=./lab.toml pvectl check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Build the registry and validate configuration without calling Proxmox."""
    from pvectl.config.discovery import describe_search
    from pvectl.services.registry import RegistryError, build_registry

    report: dict[str, Any] = {
        "config_path": str(app.settings.config_path) if app.settings.config_path else None,
        "allow_elevated": app.settings.permissions.allow_elevated,
    }
    problems: list[str] = []

    try:
        registry = build_registry()
    except RegistryError as exc:
        problems.append(str(exc))
    else:
        arms = [arm for d in registry.values() if d.router is not None for arm in d.router.arms()]
        gated = sum(1 for d in registry.values() if d.router is None and d.elevated)
        report["commands"] = len(registry)
        report["actions"] = len(arms)
        report["elevated_actions"] = gated + sum(1 for arm in arms if arm.elevated)

    problems.extend(f"missing setting: {name}" for name in app.settings.api_problems())
    report["problems"] = problems

    if app.settings.json_output:
        click.echo(json.dumps(report, indent=2))
    else:
        if report["config_path"]:
            lines = [f"Config: {report['config_path']}"]
        else:
            lines = [f"Config: none found (searched {describe_search()}); using env and defaults"]
        if "commands" in report:
            lines.append(
                f"Registry: {report['commands']} commands, {report['actions']} routed actions "
                f"({report['elevated_actions']} elevated)"
            )
        lines.append(f"Elevated commands allowed: {'yes' if report['allow_elevated'] else 'no'}")
        lines.extend(f"ERROR: {problem}" for problem in problems)
        if not problems:
            lines.append("OK")
        click.echo("\n".join(lines), err=bool(problems))
    if problems:
        raise SystemExit(1)
