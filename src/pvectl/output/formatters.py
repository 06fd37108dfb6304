"""Text/JSON output helpers for envelopes.

The CLI prints an envelope's markdown text for humans, or the MCP
``CallToolResult`` shape for machines (--json).
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pvectl.services.result import Envelope


def format_envelope(envelope: Envelope, *, json_output: bool = False) -> str:
    """Format an envelope for display.

    Args:
        envelope: The command outcome to format.
        json_output: If True, return JSON; otherwise the markdown text.
    """
    if json_output:
        return _json.dumps(envelope.to_mcp(), indent=2)
    return envelope.text


def format_json(data: Any) -> str:
    """Pretty JSON for listings and schemas."""
    return _json.dumps(data, indent=2, sort_keys=False)
