"""proxmox_storage_config — datacenter storage definitions and node usage."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from pvectl.domain.commands import CommandCategory, CommandName
from pvectl.domain.types import NodeName, StorageId
from pvectl.operations._common import Args, body_of, ensure_list, ensure_mapping, segment
from pvectl.output.markdown import bullet, details, format_bytes, heading, listing, task_result
from pvectl.services.context import ExecutionContext
from pvectl.services.registry import CommandDescriptor
from pvectl.services.result import SuccessEnvelope, ok
from pvectl.services.router import Action, ActionRouter

StorageType = Literal[
    "btrfs",
    "cephfs",
    "cifs",
    "dir",
    "esxi",
    "glusterfs",
    "iscsi",
    "iscsidirect",
    "lvm",
    "lvmthin",
    "nfs",
    "pbs",
    "rbd",
    "zfs",
    "zfspool",
]


class StorageList(Args):
    """List storage definitions."""

    action: Literal["list"]
    type: StorageType | None = Field(default=None, description="Only list this storage type")


class StorageGet(Args):
    """Show one storage definition."""

    action: Literal["get"]
    storage: StorageId


class StorageClusterUsage(Args):
    """Show usage of every storage as seen from one node."""

    action: Literal["cluster_usage"]
    node: NodeName


class _StorageOptions(Args):
    content: str | None = Field(default=None, description="Content types (comma-separated)")
    path: str | None = Field(default=None, description="Filesystem path for directory storage")
    server: str | None = Field(default=None, description="Remote server hostname or IP")
    export: str | None = Field(default=None, description="NFS export path")
    share: str | None = Field(default=None, description="CIFS share name")
    username: str | None = None
    password: str | None = None
    domain: str | None = Field(default=None, description="CIFS domain")
    nodes: str | None = Field(default=None, description="Limit storage to specific nodes")
    shared: bool | None = None
    disable: bool | None = None
    prune_backups: str | None = Field(default=None, alias="prune-backups")
    pool: str | None = Field(default=None, description="Pool name for Ceph/RBD/ZFS")
    vgname: str | None = Field(default=None, description="LVM volume group name")
    thinpool: str | None = Field(default=None, description="LVM thin pool name")
    monhost: str | None = Field(default=None, description="Ceph monitor hosts")
    portal: str | None = Field(default=None, description="iSCSI portal address")
    target: str | None = Field(default=None, description="iSCSI target")
    options: str | None = Field(default=None, description="Additional mount options")


class StorageCreate(_StorageOptions):
    """Create a storage definition."""

    action: Literal["create"]
    storage: StorageId
    type: StorageType


class StorageUpdate(_StorageOptions):
    """Change a storage definition."""

    action: Literal["update"]
    storage: StorageId
    delete: str | None = Field(default=None, description="Settings to delete")
    digest: str | None = Field(default=None, max_length=64, description="Config digest")


class StorageDelete(Args):
    """Remove a storage definition (data on it is kept)."""

    action: Literal["delete"]
    storage: StorageId


def list_storage(context: ExecutionContext, args: StorageList) -> SuccessEnvelope:
    query = {"type": args.type} if args.type else None
    entries = ensure_list(context.client.request("/storage", "GET", query), "storage list")
    return ok(
        listing(
            "Storage", entries, key="storage", noun="storage", extra=("type", "content", "shared")
        )
    )


def get_storage(context: ExecutionContext, args: StorageGet) -> SuccessEnvelope:
    entry = ensure_mapping(
        context.client.request(f"/storage/{segment(args.storage)}"), "storage config"
    )
    return ok(details(f"Storage {args.storage}", entry, skip=("digest",)))


def storage_usage(context: ExecutionContext, args: StorageClusterUsage) -> SuccessEnvelope:
    entries = ensure_list(
        context.client.request(f"/nodes/{segment(args.node)}/storage"), "storage usage"
    )
    out = heading(f"Storage Usage on {args.node}")
    if not entries:
        return ok(out + "No storages found.")
    for entry in entries:
        used = format_bytes(entry.get("used") or 0)
        total = format_bytes(entry.get("total") or 0)
        state = "active" if entry.get("active") else "inactive"
        out += f"- **{entry.get('storage', 'unknown')}** ({state}) - {used} / {total}\n"
    return ok(out + f"\n**Total**: {len(entries)} storage(s)")


def create_storage(context: ExecutionContext, args: StorageCreate) -> SuccessEnvelope:
    result = context.client.request("/storage", "POST", body_of(args))
    out = heading("Storage Created")
    out += bullet("Storage", args.storage)
    out += bullet("Type", args.type)
    return ok(out + task_result(result).rstrip("\n"))


def update_storage(context: ExecutionContext, args: StorageUpdate) -> SuccessEnvelope:
    payload = body_of(args, exclude=("storage",))
    result = context.client.request(f"/storage/{segment(args.storage)}", "PUT", payload)
    out = heading("Storage Updated")
    out += bullet("Storage", args.storage)
    return ok(out + task_result(result).rstrip("\n"))


def delete_storage(context: ExecutionContext, args: StorageDelete) -> SuccessEnvelope:
    result = context.client.request(f"/storage/{segment(args.storage)}", "DELETE")
    out = heading("Storage Deleted")
    out += bullet("Storage", args.storage)
    return ok(out + task_result(result).rstrip("\n"))


STORAGE_ROUTER = ActionRouter(
    "action",
    [
        Action("list", StorageList, list_storage, label="List Storage"),
        Action("get", StorageGet, get_storage, label="Get Storage"),
        Action("cluster_usage", StorageClusterUsage, storage_usage, label="Get Storage Usage"),
        Action("create", StorageCreate, create_storage, label="Create Storage", elevated=True),
        Action("update", StorageUpdate, update_storage, label="Update Storage", elevated=True),
        Action("delete", StorageDelete, delete_storage, label="Delete Storage", elevated=True),
    ],
)

DESCRIPTORS = (
    CommandDescriptor.consolidated(
        CommandName.STORAGE_CONFIG,
        "Manage datacenter storage definitions and inspect per-node storage usage.",
        category=CommandCategory.STORAGE,
        router=STORAGE_ROUTER,
        label="Storage Config",
    ),
)
