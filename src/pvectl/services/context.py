"""ExecutionContext — process-wide, read-only state shared by every invocation.

Built once at startup from :class:`PveSettings` and passed by reference
into every handler. It is frozen; no handler may mutate it, so it is
safe to share across concurrent invocations without locking.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from pvectl.config.settings import PveSettings


class RemoteClient(Protocol):
    """The single remote-call collaborator.

    Owns authentication, transport, timeouts and retry policy. Resolves
    with parsed data or raises.
    """

    def request(self, path: str, method: str = "GET", body: Any = None) -> Any: ...


@dataclass(frozen=True)
class ExecutionContext:
    """Capability flag plus the remote client handle."""

    client: RemoteClient
    allow_elevated: bool = False


def build_context(settings: PveSettings) -> ExecutionContext:
    """Create the execution context (and its Proxmox client) from settings.

    Raises ConfigurationError if the API connection settings are incomplete.
    """
    from pvectl.infrastructure.proxmox import ProxmoxClient

    settings.require_api()
    client = ProxmoxClient(settings.proxmox, settings.tls)
    return ExecutionContext(client=client, allow_elevated=settings.permissions.allow_elevated)
