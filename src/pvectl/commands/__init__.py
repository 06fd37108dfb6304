"""Subcommand modules for pvectl.

Provides register_commands() which uses deferred imports to keep
``pvectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from pvectl.commands.tools import tools

    cli.add_command(tools)

    # --- Standalone commands ---
    from pvectl.commands.check import check
    from pvectl.commands.serve import serve

    cli.add_command(check)
    cli.add_command(serve)
