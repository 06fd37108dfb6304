"""Leaf operations — one module per resource area.

Each module defines its input models, handlers (one remote call each,
rendered to markdown), routers, and a ``DESCRIPTORS`` tuple.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pvectl.services.registry import CommandDescriptor


def all_descriptors() -> Iterator[CommandDescriptor]:
    """Yield every command descriptor, grouped by module."""
    from pvectl.operations import (
        access,
        cluster,
        guests,
        ha,
        nodes,
        pools,
        sdn,
        snapshots,
        storage,
    )

    for module in (nodes, cluster, guests, snapshots, storage, pools, sdn, access, ha):
        yield from module.DESCRIPTORS
