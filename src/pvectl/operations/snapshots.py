"""proxmox_guest_snapshot — snapshot management routed on ``operation``.

The guest flavour is an ordinary ``type`` field here; only ``operation``
selects the arm.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from pvectl.domain.commands import CommandCategory, CommandName
from pvectl.domain.types import GuestType, NodeName, VmId
from pvectl.operations._common import Args, ensure_list, segment
from pvectl.output.markdown import bullet, heading, task_result
from pvectl.services.context import ExecutionContext
from pvectl.services.registry import CommandDescriptor
from pvectl.services.result import SuccessEnvelope, ok
from pvectl.services.router import Action, ActionRouter

SnapshotName = Annotated[
    str,
    Field(
        min_length=1,
        max_length=40,
        pattern=r"^[A-Za-z][A-Za-z0-9_-]*$",
        description="Snapshot name (starts with a letter)",
    ),
]


class _SnapshotTarget(Args):
    type: GuestType = Field(description="vm or lxc")
    node: NodeName
    vmid: VmId


class SnapshotList(_SnapshotTarget):
    """List snapshots of a guest."""

    operation: Literal["list"]


class SnapshotCreate(_SnapshotTarget):
    """Create a snapshot."""

    operation: Literal["create"]
    snapname: SnapshotName
    description: str | None = None
    vmstate: bool | None = Field(default=None, description="Include RAM state (VMs only)")


class SnapshotRollback(_SnapshotTarget):
    """Roll a guest back to a snapshot."""

    operation: Literal["rollback"]
    snapname: SnapshotName


class SnapshotDelete(_SnapshotTarget):
    """Delete a snapshot."""

    operation: Literal["delete"]
    snapname: SnapshotName


def _base(args: _SnapshotTarget) -> str:
    return f"/nodes/{segment(args.node)}/{args.type.api_segment}/{segment(args.vmid)}/snapshot"


def list_snapshots(context: ExecutionContext, args: SnapshotList) -> SuccessEnvelope:
    snapshots = [
        snap
        for snap in ensure_list(context.client.request(_base(args)), "snapshot list")
        if snap.get("name") != "current"
    ]
    out = heading(f"Snapshots of {args.type} {args.vmid}")
    if not snapshots:
        return ok(out + "No snapshots found.")
    for snap in snapshots:
        out += f"- **{snap.get('name', 'unknown')}**"
        if snap.get("description"):
            out += f" - {snap['description'].strip()}"
        if snap.get("parent"):
            out += f" - parent: {snap['parent']}"
        out += "\n"
    return ok(out + f"\n**Total**: {len(snapshots)} snapshot(s)")


def create_snapshot(context: ExecutionContext, args: SnapshotCreate) -> SuccessEnvelope:
    payload: dict[str, object] = {"snapname": args.snapname}
    if args.description:
        payload["description"] = args.description
    if args.vmstate is not None and args.type is GuestType.VM:
        payload["vmstate"] = args.vmstate
    result = context.client.request(_base(args), "POST", payload)
    out = heading("Snapshot Created")
    out += bullet("Guest", f"{args.type} {args.vmid}")
    out += bullet("Snapshot", args.snapname)
    return ok(out + task_result(result).rstrip("\n"))


def rollback_snapshot(context: ExecutionContext, args: SnapshotRollback) -> SuccessEnvelope:
    result = context.client.request(f"{_base(args)}/{segment(args.snapname)}/rollback", "POST")
    out = heading("Snapshot Rollback Started")
    out += bullet("Guest", f"{args.type} {args.vmid}")
    out += bullet("Snapshot", args.snapname)
    return ok(out + task_result(result).rstrip("\n"))


def delete_snapshot(context: ExecutionContext, args: SnapshotDelete) -> SuccessEnvelope:
    result = context.client.request(f"{_base(args)}/{segment(args.snapname)}", "DELETE")
    out = heading("Snapshot Deleted")
    out += bullet("Guest", f"{args.type} {args.vmid}")
    out += bullet("Snapshot", args.snapname)
    return ok(out + task_result(result).rstrip("\n"))


SNAPSHOT_ROUTER = ActionRouter(
    "operation",
    [
        Action("list", SnapshotList, list_snapshots, label="List Snapshots"),
        Action("create", SnapshotCreate, create_snapshot, label="Create Snapshot", elevated=True),
        Action(
            "rollback",
            SnapshotRollback,
            rollback_snapshot,
            label="Rollback Snapshot",
            elevated=True,
        ),
        Action("delete", SnapshotDelete, delete_snapshot, label="Delete Snapshot", elevated=True),
    ],
)

DESCRIPTORS = (
    CommandDescriptor.consolidated(
        CommandName.GUEST_SNAPSHOT,
        "List, create, roll back or delete snapshots of a VM or container.",
        category=CommandCategory.GUESTS,
        router=SNAPSHOT_ROUTER,
        label="Guest Snapshot",
    ),
)
