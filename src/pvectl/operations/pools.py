"""proxmox_pool — resource pools."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import Field

from pvectl.domain.commands import CommandCategory, CommandName
from pvectl.operations._common import Args, body_of, ensure_list, ensure_mapping, segment
from pvectl.output.markdown import bullet, heading, task_result
from pvectl.services.context import ExecutionContext
from pvectl.services.registry import CommandDescriptor
from pvectl.services.result import SuccessEnvelope, ok
from pvectl.services.router import Action, ActionRouter

PoolId = Annotated[
    str, Field(min_length=1, max_length=64, pattern=r"^[A-Za-z0-9._-]+$", description="Pool ID")
]


class PoolList(Args):
    """List resource pools."""

    action: Literal["list"]


class PoolGet(Args):
    """Show one pool and its members."""

    action: Literal["get"]
    poolid: PoolId


class PoolCreate(Args):
    """Create a resource pool."""

    action: Literal["create"]
    poolid: PoolId
    comment: str | None = None


class PoolUpdate(Args):
    """Change a pool's comment or membership."""

    action: Literal["update"]
    poolid: PoolId
    comment: str | None = None
    vms: str | None = Field(default=None, description="Comma-separated VMIDs to add")
    storage: str | None = Field(default=None, description="Comma-separated storage IDs to add")
    delete: bool | None = Field(default=None, description="Remove the listed members instead")
    digest: str | None = Field(default=None, max_length=64)


class PoolDelete(Args):
    """Delete an empty resource pool."""

    action: Literal["delete"]
    poolid: PoolId


def _member_line(member: dict[str, Any]) -> str:
    line = f"- **{member.get('id', 'unknown')}** ({member.get('type', 'unknown')})"
    for column in ("node", "vmid", "storage", "status"):
        if member.get(column) not in (None, ""):
            line += f" - {column}: {member[column]}"
    return line + "\n"


def list_pools(context: ExecutionContext, args: PoolList) -> SuccessEnvelope:
    pools = ensure_list(context.client.request("/pools"), "pool list")
    out = heading("Pools")
    if not pools:
        return ok(out + "No pools found.")
    for pool in pools:
        out += f"- **{pool.get('poolid', 'unknown')}**"
        if pool.get("comment"):
            out += f" - {pool['comment']}"
        if pool.get("members") is not None:
            out += f" - members: {len(pool['members'])}"
        out += "\n"
    return ok(out + f"\n**Total**: {len(pools)} pool(s)")


def get_pool(context: ExecutionContext, args: PoolGet) -> SuccessEnvelope:
    pool = ensure_mapping(context.client.request(f"/pools/{segment(args.poolid)}"), "pool")
    out = heading("Pool Details")
    out += bullet("Pool", args.poolid)
    if pool.get("comment"):
        out += bullet("Comment", pool["comment"])
    out += "\n**Members**\n"
    members = ensure_list(pool.get("members"), "pool members")
    if not members:
        return ok(out + "No members assigned.")
    return ok((out + "".join(_member_line(m) for m in members)).rstrip("\n"))


def create_pool(context: ExecutionContext, args: PoolCreate) -> SuccessEnvelope:
    result = context.client.request("/pools", "POST", body_of(args))
    out = heading("Pool Created")
    out += bullet("Pool", args.poolid)
    if args.comment:
        out += bullet("Comment", args.comment)
    return ok(out + task_result(result).rstrip("\n"))


def update_pool(context: ExecutionContext, args: PoolUpdate) -> SuccessEnvelope:
    payload = body_of(args, exclude=("poolid",))
    result = context.client.request(f"/pools/{segment(args.poolid)}", "PUT", payload)
    out = heading("Pool Updated")
    out += bullet("Pool", args.poolid)
    return ok(out + task_result(result).rstrip("\n"))


def delete_pool(context: ExecutionContext, args: PoolDelete) -> SuccessEnvelope:
    result = context.client.request(f"/pools/{segment(args.poolid)}", "DELETE")
    out = heading("Pool Deleted")
    out += bullet("Pool", args.poolid)
    return ok(out + task_result(result).rstrip("\n"))


POOL_ROUTER = ActionRouter(
    "action",
    [
        Action("list", PoolList, list_pools, label="List Pools"),
        Action("get", PoolGet, get_pool, label="Get Pool"),
        Action("create", PoolCreate, create_pool, label="Create Pool", elevated=True),
        Action("update", PoolUpdate, update_pool, label="Update Pool", elevated=True),
        Action("delete", PoolDelete, delete_pool, label="Delete Pool", elevated=True),
    ],
)

DESCRIPTORS = (
    CommandDescriptor.consolidated(
        CommandName.POOL,
        "List, inspect, create, update or delete resource pools.",
        category=CommandCategory.STORAGE,
        router=POOL_ROUTER,
        label="Pool",
    ),
)
