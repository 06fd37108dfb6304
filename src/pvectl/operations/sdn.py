"""proxmox_sdn_vnet — SDN virtual networks."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from pvectl.domain.commands import CommandCategory, CommandName
from pvectl.operations._common import Args, body_of, ensure_list, ensure_mapping, segment
from pvectl.output.markdown import bullet, details, heading, listing, task_result
from pvectl.services.context import ExecutionContext
from pvectl.services.registry import CommandDescriptor
from pvectl.services.result import SuccessEnvelope, ok
from pvectl.services.router import Action, ActionRouter

VnetId = Annotated[
    str,
    Field(
        min_length=1,
        max_length=8,
        pattern=r"^[A-Za-z][A-Za-z0-9]*$",
        description="VNet identifier (letters and digits, max 8)",
    ),
]


class VnetList(Args):
    """List SDN VNets."""

    action: Literal["list"]


class VnetGet(Args):
    """Show one SDN VNet."""

    action: Literal["get"]
    vnet: VnetId


class _VnetOptions(Args):
    zone: str | None = Field(default=None, description="SDN zone identifier")
    alias: str | None = None
    tag: int | None = Field(default=None, ge=1, le=16_777_215, description="VLAN or VXLAN tag")
    vlanaware: bool | None = Field(default=None, description="Allow VLANs inside the VNet")
    isolate_ports: bool | None = Field(default=None, alias="isolate-ports")


class VnetCreate(_VnetOptions):
    """Create an SDN VNet."""

    action: Literal["create"]
    vnet: VnetId
    zone: str = Field(min_length=1, description="SDN zone identifier")


class VnetUpdate(_VnetOptions):
    """Change an SDN VNet."""

    action: Literal["update"]
    vnet: VnetId
    delete: str | None = Field(default=None, description="Comma-separated options to delete")
    digest: str | None = Field(default=None, max_length=64)


class VnetDelete(Args):
    """Delete an SDN VNet."""

    action: Literal["delete"]
    vnet: VnetId


def list_vnets(context: ExecutionContext, args: VnetList) -> SuccessEnvelope:
    vnets = ensure_list(context.client.request("/cluster/sdn/vnets"), "VNet list")
    return ok(listing("SDN VNets", vnets, key="vnet", noun="VNet", extra=("zone", "tag", "alias")))


def get_vnet(context: ExecutionContext, args: VnetGet) -> SuccessEnvelope:
    path = f"/cluster/sdn/vnets/{segment(args.vnet)}"
    vnet = ensure_mapping(context.client.request(path), "VNet")
    return ok(details(f"SDN VNet {args.vnet}", vnet, skip=("digest",)))


def create_vnet(context: ExecutionContext, args: VnetCreate) -> SuccessEnvelope:
    result = context.client.request("/cluster/sdn/vnets", "POST", body_of(args))
    out = heading("SDN VNet Created")
    out += bullet("VNet", args.vnet)
    out += bullet("Zone", args.zone)
    return ok(out + task_result(result).rstrip("\n"))


def update_vnet(context: ExecutionContext, args: VnetUpdate) -> SuccessEnvelope:
    payload = body_of(args, exclude=("vnet",))
    result = context.client.request(f"/cluster/sdn/vnets/{segment(args.vnet)}", "PUT", payload)
    out = heading("SDN VNet Updated")
    out += bullet("VNet", args.vnet)
    return ok(out + task_result(result).rstrip("\n"))


def delete_vnet(context: ExecutionContext, args: VnetDelete) -> SuccessEnvelope:
    result = context.client.request(f"/cluster/sdn/vnets/{segment(args.vnet)}", "DELETE")
    out = heading("SDN VNet Deleted")
    out += bullet("VNet", args.vnet)
    return ok(out + task_result(result).rstrip("\n"))


VNET_ROUTER = ActionRouter(
    "action",
    [
        Action("list", VnetList, list_vnets, label="List SDN VNets"),
        Action("get", VnetGet, get_vnet, label="Get SDN VNet"),
        Action("create", VnetCreate, create_vnet, label="Create SDN VNet", elevated=True),
        Action("update", VnetUpdate, update_vnet, label="Update SDN VNet", elevated=True),
        Action("delete", VnetDelete, delete_vnet, label="Delete SDN VNet", elevated=True),
    ],
)

DESCRIPTORS = (
    CommandDescriptor.consolidated(
        CommandName.SDN_VNET,
        "List, inspect, create, update or delete SDN virtual networks.",
        category=CommandCategory.SDN,
        router=VNET_ROUTER,
        label="SDN VNet",
    ),
)
