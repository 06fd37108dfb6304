"""proxmox_ha_resource — high-availability resources and manager status."""

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

ServiceId = Annotated[
    str,
    Field(
        min_length=1,
        pattern=r"^(?:(?:vm|ct):)?\d+$",
        description="HA resource ID, e.g. vm:100 or ct:101 (bare VMIDs are accepted)",
    ),
]

HaState = Literal["started", "stopped", "enabled", "disabled", "ignored"]


class HaList(Args):
    """List HA resources."""

    action: Literal["list"]
    type: Literal["vm", "ct"] | None = Field(default=None, description="Only this resource type")


class HaGet(Args):
    """Show one HA resource."""

    action: Literal["get"]
    sid: ServiceId


class HaStatus(Args):
    """Show the HA manager status."""

    action: Literal["status"]


class _HaOptions(Args):
    comment: str | None = None
    group: str | None = Field(default=None, description="HA group identifier")
    max_relocate: int | None = Field(default=None, ge=0)
    max_restart: int | None = Field(default=None, ge=0)
    state: HaState | None = None


class HaCreate(_HaOptions):
    """Put a guest under HA management."""

    action: Literal["create"]
    sid: ServiceId


class HaUpdate(_HaOptions):
    """Change an HA resource."""

    action: Literal["update"]
    sid: ServiceId
    delete: str | None = Field(default=None, description="Settings to delete")
    digest: str | None = Field(default=None, max_length=64)


class HaDelete(Args):
    """Remove a guest from HA management."""

    action: Literal["delete"]
    sid: ServiceId


def _sid_path(sid: str) -> str:
    return f"/cluster/ha/resources/{segment(sid)}"


def list_ha_resources(context: ExecutionContext, args: HaList) -> SuccessEnvelope:
    query = {"type": args.type} if args.type else None
    resources = ensure_list(
        context.client.request("/cluster/ha/resources", "GET", query), "HA resource list"
    )
    return ok(
        listing(
            "HA Resources",
            resources,
            key="sid",
            noun="HA resource",
            extra=("state", "group", "comment"),
        )
    )


def get_ha_resource(context: ExecutionContext, args: HaGet) -> SuccessEnvelope:
    resource = ensure_mapping(context.client.request(_sid_path(args.sid)), "HA resource")
    return ok(details(f"HA Resource {args.sid}", resource, skip=("digest",)))


def ha_status(context: ExecutionContext, args: HaStatus) -> SuccessEnvelope:
    entries = ensure_list(context.client.request("/cluster/ha/status/current"), "HA status")
    out = heading("HA Status")
    if not entries:
        return ok(out + "No HA status entries found.")
    for entry in entries:
        out += f"- **{entry.get('id', 'unknown')}** ({entry.get('type', 'unknown')})"
        if entry.get("status"):
            out += f" - {entry['status']}"
        out += "\n"
    return ok(out.rstrip("\n"))


def create_ha_resource(context: ExecutionContext, args: HaCreate) -> SuccessEnvelope:
    result = context.client.request("/cluster/ha/resources", "POST", body_of(args))
    out = heading("HA Resource Created")
    out += bullet("Resource", args.sid)
    return ok(out + task_result(result).rstrip("\n"))


def update_ha_resource(context: ExecutionContext, args: HaUpdate) -> SuccessEnvelope:
    payload = body_of(args, exclude=("sid",))
    result = context.client.request(_sid_path(args.sid), "PUT", payload)
    out = heading("HA Resource Updated")
    out += bullet("Resource", args.sid)
    return ok(out + task_result(result).rstrip("\n"))


def delete_ha_resource(context: ExecutionContext, args: HaDelete) -> SuccessEnvelope:
    result = context.client.request(_sid_path(args.sid), "DELETE")
    out = heading("HA Resource Deleted")
    out += bullet("Resource", args.sid)
    return ok(out + task_result(result).rstrip("\n"))


HA_ROUTER = ActionRouter(
    "action",
    [
        Action("list", HaList, list_ha_resources, label="List HA Resources"),
        Action("get", HaGet, get_ha_resource, label="Get HA Resource"),
        Action("status", HaStatus, ha_status, label="Get HA Status"),
        Action("create", HaCreate, create_ha_resource, label="Create HA Resource", elevated=True),
        Action("update", HaUpdate, update_ha_resource, label="Update HA Resource", elevated=True),
        Action("delete", HaDelete, delete_ha_resource, label="Delete HA Resource", elevated=True),
    ],
)

DESCRIPTORS = (
    CommandDescriptor.consolidated(
        CommandName.HA_RESOURCE,
        "Manage high-availability resources and read the HA manager status.",
        category=CommandCategory.HA,
        router=HA_ROUTER,
        label="HA Resource",
    ),
)
