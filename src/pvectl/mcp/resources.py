"""MCP resources — the command reference as readable documents."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pvectl.output.renderers import render_command_docs

if TYPE_CHECKING:
    from pvectl.services.dispatch import Dispatcher


def commands_impl(dispatcher: Dispatcher) -> str:
    """Markdown reference of every command."""
    return render_command_docs(dispatcher.describe())


def catalog_impl(dispatcher: Dispatcher) -> str:
    """Compact JSON catalog: name, category, access, actions."""
    catalog = [
        {
            "name": entry["name"],
            "category": entry["category"],
            "elevated": entry["elevated"],
            "actions": entry["actions"],
        }
        for entry in dispatcher.describe()
    ]
    return json.dumps(catalog, indent=2)


def register_resources(server: Any, dispatcher: Dispatcher) -> None:
    """Register the command reference resources on the FastMCP server."""

    @server.resource("pvectl://commands")  # type: ignore[untyped-decorator]
    def commands_resource() -> str:
        """Markdown reference of every command and its parameters."""
        return commands_impl(dispatcher)

    @server.resource("pvectl://catalog")  # type: ignore[untyped-decorator]
    def catalog_resource() -> str:
        """JSON catalog of command names, categories and actions."""
        return catalog_impl(dispatcher)
