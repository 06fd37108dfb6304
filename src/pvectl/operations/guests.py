"""Guest commands covering both QEMU VMs and LXC containers.

Except for the listing, every command here is routed on ``type``
(``vm`` or ``lxc``). Both arms share one handler, which picks the API path
segment from the tag.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

from pydantic import Field

from pvectl.domain.commands import CommandCategory, CommandName
from pvectl.domain.types import GuestFilter, GuestType, NodeName, VmId
from pvectl.operations._common import Args, body_of, ensure_list, ensure_mapping, segment
from pvectl.output.markdown import (
    bullet,
    details,
    format_bytes,
    format_percent,
    format_uptime,
    heading,
    task_result,
)
from pvectl.services.context import ExecutionContext
from pvectl.services.registry import CommandDescriptor
from pvectl.services.result import SuccessEnvelope, ok
from pvectl.services.router import Action, ActionRouter

_NOUN = {GuestType.VM: "VM", GuestType.LXC: "Container"}

# ── proxmox_guest_list ───────────────────────────────────────────────


class GuestListArgs(Args):
    node: NodeName | None = Field(default=None, description="Only list guests on this node")
    type: GuestFilter = Field(default=GuestFilter.ALL, description="Guest type filter")


def list_guests(context: ExecutionContext, args: GuestListArgs) -> SuccessEnvelope:
    resources = ensure_list(
        context.client.request("/cluster/resources", "GET", {"type": "vm"}), "guest list"
    )
    guests = [
        guest
        for guest in resources
        if (args.node is None or guest.get("node") == args.node)
        and (args.type is GuestFilter.ALL or guest.get("type") == args.type)
    ]
    guests.sort(key=lambda guest: guest.get("vmid", 0))

    out = heading("Virtual Machines and Containers")
    if not guests:
        return ok(out + "No guests found.")
    for guest in guests:
        kind = "LXC" if guest.get("type") == "lxc" else "VM"
        out += (
            f"- **{guest.get('name') or guest.get('vmid')}** ({kind} {guest.get('vmid')})"
            f" - {guest.get('status', 'unknown')} on {guest.get('node', 'unknown')}\n"
        )
    return ok(out + f"\n**Total**: {len(guests)} guest(s)")


# ── type-discriminated commands ──────────────────────────────────────


class _GuestRef(Args):
    node: NodeName
    vmid: VmId


class VmRef(_GuestRef):
    """Target a QEMU virtual machine."""

    type: Literal["vm"]


class LxcRef(_GuestRef):
    """Target an LXC container."""

    type: Literal["lxc"]


class _GuestStop(_GuestRef):
    timeout: int | None = Field(default=None, ge=0, description="Seconds to wait")


class VmStop(_GuestStop):
    """Stop a QEMU virtual machine immediately."""

    type: Literal["vm"]


class LxcStop(_GuestStop):
    """Stop an LXC container immediately."""

    type: Literal["lxc"]


class _GuestShutdown(_GuestRef):
    timeout: int | None = Field(default=None, ge=0, description="Seconds to wait")
    force_stop: bool | None = Field(
        default=None, alias="forceStop", description="Hard-stop if the timeout expires"
    )


class VmShutdown(_GuestShutdown):
    """Shut down a QEMU virtual machine gracefully."""

    type: Literal["vm"]


class LxcShutdown(_GuestShutdown):
    """Shut down an LXC container gracefully."""

    type: Literal["lxc"]


class _GuestDelete(_GuestRef):
    purge: bool | None = Field(default=None, description="Also remove from jobs and HA")
    destroy_unreferenced_disks: bool | None = Field(
        default=None, alias="destroy-unreferenced-disks"
    )


class VmDelete(_GuestDelete):
    """Delete a QEMU virtual machine."""

    type: Literal["vm"]


class LxcDelete(_GuestDelete):
    """Delete an LXC container."""

    type: Literal["lxc"]


def _guest_path(args: Any) -> str:
    guest_type = GuestType(args.type)
    return f"/nodes/{segment(args.node)}/{guest_type.api_segment}/{segment(args.vmid)}"


def guest_status(context: ExecutionContext, args: VmRef | LxcRef) -> SuccessEnvelope:
    status = ensure_mapping(
        context.client.request(f"{_guest_path(args)}/status/current"), "guest status"
    )
    noun = _NOUN[GuestType(args.type)]
    out = heading(f"{noun} {args.vmid}: {status.get('name', 'unnamed')}")
    out += bullet("Status", status.get("status", "unknown"))
    out += bullet("Node", args.node)
    if status.get("status") == "running":
        out += bullet("Uptime", format_uptime(status.get("uptime") or 0))
        out += bullet("CPU", format_percent(status.get("cpu") or 0))
    out += bullet(
        "Memory",
        f"{format_bytes(status.get('mem') or 0)} / {format_bytes(status.get('maxmem') or 0)}",
    )
    if status.get("maxdisk"):
        out += bullet("Disk", format_bytes(status["maxdisk"]))
    return ok(out.rstrip("\n"))


def guest_config(context: ExecutionContext, args: VmRef | LxcRef) -> SuccessEnvelope:
    config = ensure_mapping(context.client.request(f"{_guest_path(args)}/config"), "guest config")
    noun = _NOUN[GuestType(args.type)]
    return ok(details(f"{noun} {args.vmid} Configuration", config, skip=("digest",)))


def _lifecycle(command: str, title: str) -> Callable[[ExecutionContext, Any], SuccessEnvelope]:
    def handler(context: ExecutionContext, args: Any) -> SuccessEnvelope:
        payload = body_of(args, exclude=("type", "node", "vmid"))
        result = context.client.request(
            f"{_guest_path(args)}/status/{command}", "POST", payload or None
        )
        noun = _NOUN[GuestType(args.type)]
        out = heading(f"{noun} {title}")
        out += bullet("VMID", args.vmid)
        out += bullet("Node", args.node)
        return ok(out + task_result(result).rstrip("\n"))

    handler.__name__ = f"{command}_guest"
    return handler


start_guest = _lifecycle("start", "Start Initiated")
stop_guest = _lifecycle("stop", "Stop Initiated")
reboot_guest = _lifecycle("reboot", "Reboot Initiated")
shutdown_guest = _lifecycle("shutdown", "Shutdown Initiated")


def delete_guest(context: ExecutionContext, args: VmDelete | LxcDelete) -> SuccessEnvelope:
    payload = body_of(args, exclude=("type", "node", "vmid"))
    result = context.client.request(_guest_path(args), "DELETE", payload or None)
    noun = _NOUN[GuestType(args.type)]
    out = heading(f"{noun} Deletion Started")
    out += bullet("VMID", args.vmid)
    out += bullet("Node", args.node)
    return ok(out + task_result(result).rstrip("\n"))


def _by_type(
    verb: str,
    vm_schema: type[Args],
    lxc_schema: type[Args],
    handler: Callable[[ExecutionContext, Any], SuccessEnvelope],
    *,
    elevated: bool = False,
) -> ActionRouter:
    return ActionRouter(
        "type",
        [
            Action("vm", vm_schema, handler, label=f"{verb} VM", elevated=elevated),
            Action("lxc", lxc_schema, handler, label=f"{verb} Container", elevated=elevated),
        ],
    )


STATUS_ROUTER = _by_type("Get Status", VmRef, LxcRef, guest_status)
CONFIG_ROUTER = _by_type("Get Config", VmRef, LxcRef, guest_config)
START_ROUTER = _by_type("Start", VmRef, LxcRef, start_guest, elevated=True)
STOP_ROUTER = _by_type("Stop", VmStop, LxcStop, stop_guest, elevated=True)
REBOOT_ROUTER = _by_type("Reboot", VmRef, LxcRef, reboot_guest, elevated=True)
SHUTDOWN_ROUTER = _by_type("Shutdown", VmShutdown, LxcShutdown, shutdown_guest, elevated=True)
DELETE_ROUTER = _by_type("Delete", VmDelete, LxcDelete, delete_guest, elevated=True)


def _consolidated(
    name: CommandName, description: str, router: ActionRouter, label: str
) -> CommandDescriptor:
    return CommandDescriptor.consolidated(
        name, description, category=CommandCategory.GUESTS, router=router, label=label
    )


DESCRIPTORS = (
    CommandDescriptor.simple(
        CommandName.GUEST_LIST,
        "List VMs and containers across the cluster, optionally by node and type.",
        category=CommandCategory.GUESTS,
        schema=GuestListArgs,
        handler=list_guests,
        label="List Guests",
    ),
    _consolidated(
        CommandName.GUEST_STATUS,
        "Get the current status of a VM or container.",
        STATUS_ROUTER,
        "Get Guest Status",
    ),
    _consolidated(
        CommandName.GUEST_CONFIG,
        "Get the configuration of a VM or container.",
        CONFIG_ROUTER,
        "Get Guest Config",
    ),
    _consolidated(
        CommandName.GUEST_START,
        "Start a VM or container.",
        START_ROUTER,
        "Start Guest",
    ),
    _consolidated(
        CommandName.GUEST_STOP,
        "Stop a VM or container immediately.",
        STOP_ROUTER,
        "Stop Guest",
    ),
    _consolidated(
        CommandName.GUEST_REBOOT,
        "Reboot a VM or container.",
        REBOOT_ROUTER,
        "Reboot Guest",
    ),
    _consolidated(
        CommandName.GUEST_SHUTDOWN,
        "Shut down a VM or container gracefully.",
        SHUTDOWN_ROUTER,
        "Shutdown Guest",
    ),
    _consolidated(
        CommandName.GUEST_DELETE,
        "Delete a VM or container and its disks.",
        DELETE_ROUTER,
        "Delete Guest",
    ),
)
