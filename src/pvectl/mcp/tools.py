"""MCP tool wiring — every registry command exposed as one MCP tool.

Each tool's ``_impl`` function is testable without the mcp package.
``register_tools()`` replaces FastMCP's own list/call handlers on the
low-level server so that tool names, descriptions and input schemas come
from the registry, and arguments reach the dispatcher unvalidated by the
SDK (the dispatcher's validator is the only one).
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pvectl.services.dispatch import Dispatcher


def list_tools_impl(
    dispatcher: Dispatcher, *, category: str | None = None
) -> list[dict[str, Any]]:
    """Tool definitions (name, description, inputSchema) for every command."""
    return [
        {
            "name": entry["name"],
            "description": entry["description"],
            "inputSchema": entry["inputSchema"],
        }
        for entry in dispatcher.describe(category=category)
    ]


def call_tool_impl(
    dispatcher: Dispatcher, name: str, arguments: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Invoke one command and return the ``CallToolResult`` shape."""
    return dispatcher.invoke(name, arguments).to_mcp()


def register_tools(server: Any, dispatcher: Dispatcher) -> None:
    """Register list/call handlers for every command on the FastMCP server."""
    import anyio
    from mcp import types
    from mcp.server.fastmcp.exceptions import ToolError

    lowlevel = server._mcp_server

    @lowlevel.list_tools()  # type: ignore[untyped-decorator]
    async def list_tools() -> list[types.Tool]:
        return [types.Tool(**definition) for definition in list_tools_impl(dispatcher)]

    @lowlevel.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        # Handlers do blocking I/O.
        envelope = await anyio.to_thread.run_sync(
            functools.partial(dispatcher.invoke, name, arguments)
        )
        if envelope.is_error:
            raise ToolError(envelope.text)
        return [types.TextContent(type="text", text=block.text) for block in envelope.content]
