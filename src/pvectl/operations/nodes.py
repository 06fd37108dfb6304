"""Node commands: listing, status, services, and physical disks."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from pvectl.domain.commands import CommandCategory, CommandName
from pvectl.domain.types import NodeName
from pvectl.operations._common import Args, ensure_list, ensure_mapping, segment
from pvectl.output.markdown import (
    bullet,
    format_bytes,
    format_percent,
    format_uptime,
    heading,
    listing,
    task_result,
)
from pvectl.services.context import ExecutionContext
from pvectl.services.registry import CommandDescriptor
from pvectl.services.result import SuccessEnvelope, ok
from pvectl.services.router import Action, ActionRouter

# ── proxmox_get_nodes ────────────────────────────────────────────────


class GetNodesArgs(Args):
    pass


def get_nodes(context: ExecutionContext, args: GetNodesArgs) -> SuccessEnvelope:
    nodes = ensure_list(context.client.request("/nodes"), "node list")
    out = heading("Cluster Nodes")
    if not nodes:
        return ok(out + "No nodes found.")
    for node in nodes:
        out += f"- **{node.get('node', 'unknown')}** ({node.get('status', 'unknown')})\n"
        if node.get("status") == "online":
            out += f"  - CPU: {format_percent(node.get('cpu') or 0)}\n"
            out += (
                f"  - Memory: {format_bytes(node.get('mem') or 0)} / "
                f"{format_bytes(node.get('maxmem') or 0)}\n"
            )
            out += f"  - Uptime: {format_uptime(node.get('uptime') or 0)}\n"
    return ok(out + f"\n**Total**: {len(nodes)} node(s)")


# ── proxmox_get_node_status ──────────────────────────────────────────


class NodeStatusArgs(Args):
    node: NodeName


def get_node_status(context: ExecutionContext, args: NodeStatusArgs) -> SuccessEnvelope:
    status = ensure_mapping(
        context.client.request(f"/nodes/{segment(args.node)}/status"), "node status"
    )
    memory: dict[str, Any] = status.get("memory") or {}
    out = heading(f"Node {args.node}")
    out += bullet("Uptime", format_uptime(status.get("uptime") or 0))
    out += bullet("CPU", format_percent(status.get("cpu") or 0))
    out += bullet(
        "Memory",
        f"{format_bytes(memory.get('used') or 0)} / {format_bytes(memory.get('total') or 0)}",
    )
    if status.get("loadavg"):
        out += bullet("Load Average", ", ".join(str(v) for v in status["loadavg"]))
    if status.get("kversion"):
        out += bullet("Kernel", status["kversion"])
    if status.get("pveversion"):
        out += bullet("PVE Version", status["pveversion"])
    return ok(out.rstrip("\n"))


# ── proxmox_node_service ─────────────────────────────────────────────


class ServiceList(Args):
    """List system services on a node."""

    action: Literal["list"]
    node: NodeName


class ServiceControl(Args):
    """Start, stop, restart or reload a node service."""

    action: Literal["control"]
    node: NodeName
    service: str = Field(min_length=1, pattern=r"^[A-Za-z0-9._@-]+$", description="Service name")
    command: Literal["start", "stop", "restart", "reload"]


def list_services(context: ExecutionContext, args: ServiceList) -> SuccessEnvelope:
    services = ensure_list(
        context.client.request(f"/nodes/{segment(args.node)}/services"), "node services"
    )
    return ok(
        listing(
            f"Services on {args.node}",
            services,
            key="name",
            noun="service",
            extra=("state", "desc"),
        )
    )


def control_service(context: ExecutionContext, args: ServiceControl) -> SuccessEnvelope:
    path = f"/nodes/{segment(args.node)}/services/{segment(args.service)}/{args.command}"
    result = context.client.request(path, "POST")
    out = heading("Service Command Issued")
    out += bullet("Node", args.node)
    out += bullet("Service", args.service)
    out += bullet("Command", args.command)
    return ok(out + task_result(result).rstrip("\n"))


SERVICE_ROUTER = ActionRouter(
    "action",
    [
        Action("list", ServiceList, list_services, label="List Node Services"),
        Action(
            "control",
            ServiceControl,
            control_service,
            label="Control Node Service",
            elevated=True,
        ),
    ],
)

# ── proxmox_node_disk ────────────────────────────────────────────────


class DiskList(Args):
    """List physical disks on a node."""

    action: Literal["list"]
    node: NodeName
    type: Literal["unused", "journal_disks"] | None = Field(
        default=None, description="Only list unused disks or journal-capable disks"
    )
    include_partitions: bool | None = Field(
        default=None, alias="include-partitions", description="Also list partitions"
    )


class DiskSmart(Args):
    """Read SMART health data for one disk."""

    action: Literal["smart"]
    node: NodeName
    disk: str = Field(
        min_length=1, pattern=r"^/dev/[A-Za-z0-9/_-]+$", description="Block device path"
    )
    healthonly: bool | None = None


class DiskLvm(Args):
    """List LVM volume groups on a node."""

    action: Literal["lvm"]
    node: NodeName


class DiskZfs(Args):
    """List ZFS pools on a node."""

    action: Literal["zfs"]
    node: NodeName


def list_disks(context: ExecutionContext, args: DiskList) -> SuccessEnvelope:
    query = {"type": args.type, "include-partitions": args.include_partitions}
    disks = ensure_list(
        context.client.request(f"/nodes/{segment(args.node)}/disks/list", "GET", query),
        "disk list",
    )
    out = heading(f"Disks on {args.node}")
    if not disks:
        return ok(out + "No disks found.")
    for disk in disks:
        out += f"- **{disk.get('devpath', 'unknown')}** - {format_bytes(disk.get('size') or 0)}"
        for column in ("type", "model", "health", "used"):
            if disk.get(column):
                out += f" - {column}: {disk[column]}"
        out += "\n"
    return ok(out + f"\n**Total**: {len(disks)} disk(s)")


def disk_smart(context: ExecutionContext, args: DiskSmart) -> SuccessEnvelope:
    query = {"disk": args.disk, "healthonly": args.healthonly}
    data = ensure_mapping(
        context.client.request(f"/nodes/{segment(args.node)}/disks/smart", "GET", query),
        "SMART data",
    )
    out = heading(f"SMART data for {args.disk}")
    out += bullet("Health", data.get("health", "unknown"))
    attributes = data.get("attributes") or []
    for attr in attributes:
        name = attr.get("name", attr.get("id", "?"))
        out += f"- {name}: {attr.get('raw', attr.get('value', ''))}\n"
    if data.get("text"):
        out += f"\n```\n{data['text']}\n```"
    return ok(out.rstrip("\n"))


def disk_lvm(context: ExecutionContext, args: DiskLvm) -> SuccessEnvelope:
    data = ensure_mapping(
        context.client.request(f"/nodes/{segment(args.node)}/disks/lvm"), "LVM volume groups"
    )
    groups = ensure_list(data.get("children"), "LVM volume groups")
    out = heading(f"LVM Volume Groups on {args.node}")
    if not groups:
        return ok(out + "No volume groups found.")
    for group in groups:
        out += (
            f"- **{group.get('name', 'unknown')}** - size: {format_bytes(group.get('size') or 0)}"
            f" - free: {format_bytes(group.get('free') or 0)}\n"
        )
    return ok(out + f"\n**Total**: {len(groups)} volume group(s)")


def disk_zfs(context: ExecutionContext, args: DiskZfs) -> SuccessEnvelope:
    pools = ensure_list(
        context.client.request(f"/nodes/{segment(args.node)}/disks/zfs"), "ZFS pools"
    )
    out = heading(f"ZFS Pools on {args.node}")
    if not pools:
        return ok(out + "No ZFS pools found.")
    for pool in pools:
        out += (
            f"- **{pool.get('name', 'unknown')}** ({pool.get('health', 'unknown')})"
            f" - size: {format_bytes(pool.get('size') or 0)}"
            f" - free: {format_bytes(pool.get('free') or 0)}\n"
        )
    return ok(out + f"\n**Total**: {len(pools)} pool(s)")


DISK_ROUTER = ActionRouter(
    "action",
    [
        Action("list", DiskList, list_disks, label="List Disks"),
        Action("smart", DiskSmart, disk_smart, label="Get Disk SMART"),
        Action("lvm", DiskLvm, disk_lvm, label="List LVM Volume Groups"),
        Action("zfs", DiskZfs, disk_zfs, label="List ZFS Pools"),
    ],
)


DESCRIPTORS = (
    CommandDescriptor.simple(
        CommandName.GET_NODES,
        "List all cluster nodes with their status and resource usage.",
        category=CommandCategory.NODES,
        schema=GetNodesArgs,
        handler=get_nodes,
        label="Get Nodes",
    ),
    CommandDescriptor.simple(
        CommandName.GET_NODE_STATUS,
        "Get detailed status for one node (uptime, CPU, memory, versions).",
        category=CommandCategory.NODES,
        schema=NodeStatusArgs,
        handler=get_node_status,
        label="Get Node Status",
    ),
    CommandDescriptor.consolidated(
        CommandName.NODE_SERVICE,
        "List or control system services on a node.",
        category=CommandCategory.NODES,
        router=SERVICE_ROUTER,
        label="Node Service",
    ),
    CommandDescriptor.consolidated(
        CommandName.NODE_DISK,
        "Query physical disks, SMART data, LVM and ZFS on a node.",
        category=CommandCategory.NODES,
        router=DISK_ROUTER,
        label="Node Disk",
    ),
)
