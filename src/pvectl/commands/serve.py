"""serve — start the MCP server (requires pvectl[mcp] extra)."""

from __future__ import annotations

import click

from pvectl.commands._base import PveCommand


@click.command(
    cls=PveCommand,
    examples="""\
  # Start the MCP server (stdio transport, default)
  pvectl serve

  # Streamable HTTP on custom host/port
  pvectl serve --transport streamable-http --host 0.0.0.0 --port 9000

  # Allow mutating commands for this server
  pvectl --allow-elevated serve""",
)
@click.option(
    "--transport",
    default=None,
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    help="MCP transport protocol (default: [mcp] transport, else stdio).",
)
@click.option("--host", default=None, help="Bind address (HTTP transports only).")
@click.option("--port", default=None, type=int, help="Listen port (HTTP transports only).")
@click.pass_obj
def serve(app: object, transport: str | None, host: str | None, port: int | None) -> None:
    """Start the MCP server (requires pvectl[mcp] extra)."""
    from pvectl.mcp.server import mcp_available

    if not mcp_available:
        click.echo("MCP not installed. Install with: pip install pvectl[mcp]", err=True)
        raise SystemExit(1)

    from pvectl.commands._context import AppContext
    from pvectl.config.settings import ConfigurationError
    from pvectl.mcp import server as mcp_server

    assert isinstance(app, AppContext)
    try:
        server = mcp_server.create_server(app.settings, host=host, port=port)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    server.run(transport=transport or app.settings.mcp.transport)
