"""Shared field types and classification enums.

The annotated aliases carry the Proxmox identifier constraints so every
command schema declares them once (node names, VMIDs, storage ids).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

from pydantic import Field

__all__ = ["GuestFilter", "GuestType", "NodeName", "StorageId", "VmId"]


class GuestType(StrEnum):
    """Guest flavour as exposed to callers."""

    VM = "vm"
    LXC = "lxc"

    @property
    def api_segment(self) -> str:
        """Path segment used by the Proxmox API (``qemu`` or ``lxc``)."""
        return "qemu" if self is GuestType.VM else "lxc"


class GuestFilter(StrEnum):
    """Type filter for guest listings (API naming)."""

    QEMU = "qemu"
    LXC = "lxc"
    ALL = "all"


NodeName = Annotated[
    str,
    Field(
        min_length=1,
        max_length=64,
        pattern=r"^[A-Za-z0-9_-]+$",
        description="Node name (alphanumeric, hyphens, underscores)",
    ),
]

VmId = Annotated[
    int,
    Field(ge=100, le=999_999_999, description="VM or container ID (100-999999999)"),
]

StorageId = Annotated[
    str,
    Field(
        min_length=1,
        max_length=64,
        pattern=r"^[A-Za-z0-9._-]+$",
        description="Storage identifier (alphanumeric, hyphens, underscores, dots)",
    ),
]
