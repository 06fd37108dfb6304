"""FastMCP server setup.

Optional extra — guarded behind try/except ImportError.
Transport: stdio default, sse and streamable HTTP optional.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pvectl.config.settings import PveSettings

mcp_available = False
_FastMCP: Any = None

try:
    from mcp.server.fastmcp import FastMCP as _FastMCP  # type: ignore[no-redef,import-not-found]

    mcp_available = True
except ImportError:
    pass

__all__ = ["create_server", "mcp_available"]


def create_server(
    settings: PveSettings | None = None,
    *,
    host: str | None = None,
    port: int | None = None,
) -> Any:
    """Create and configure the MCP server.

    Builds the registry and execution context from *settings* (discovered
    from env and ``pvectl.toml`` when omitted), then registers every command
    as a tool. Returns the FastMCP instance.

    *host* and *port* override ``[mcp]`` for HTTP transports (sse,
    streamable-http). They are ignored when using stdio.

    Raises RuntimeError if the mcp extra is not installed, and
    ConfigurationError if the Proxmox connection settings are incomplete.
    """
    if not mcp_available or _FastMCP is None:
        msg = "MCP extra not installed. Install with: pip install pvectl[mcp]"
        raise RuntimeError(msg)

    from pvectl.config.settings import PveSettings
    from pvectl.mcp.resources import register_resources
    from pvectl.mcp.tools import register_tools
    from pvectl.services.context import build_context
    from pvectl.services.dispatch import Dispatcher
    from pvectl.services.registry import default_registry

    if settings is None:
        settings = PveSettings.from_cli()
    dispatcher = Dispatcher(default_registry(), build_context(settings))

    server = _FastMCP(
        "pvectl",
        host=host or settings.mcp.host,
        port=port or settings.mcp.port,
    )

    register_tools(server, dispatcher)
    register_resources(server, dispatcher)

    return server
