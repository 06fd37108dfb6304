"""proxmox_user — access control users."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from pvectl.domain.commands import CommandCategory, CommandName
from pvectl.operations._common import Args, body_of, ensure_list, ensure_mapping, segment
from pvectl.output.markdown import bullet, details, heading, task_result
from pvectl.services.context import ExecutionContext
from pvectl.services.registry import CommandDescriptor
from pvectl.services.result import SuccessEnvelope, ok
from pvectl.services.router import Action, ActionRouter

UserId = Annotated[
    str,
    Field(
        min_length=3,
        max_length=64,
        pattern=r"^[^\s@:/]+@[A-Za-z0-9._-]+$",
        description="User ID with realm (e.g. alice@pve)",
    ),
]

Email = Annotated[str, Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", description="Email address")]


class UserList(Args):
    """List users."""

    action: Literal["list"]
    enabled: bool | None = Field(default=None, description="Only enabled (or disabled) users")


class UserGet(Args):
    """Show one user."""

    action: Literal["get"]
    userid: UserId


class _UserOptions(Args):
    comment: str | None = None
    email: Email | None = None
    firstname: str | None = None
    lastname: str | None = None
    groups: str | None = Field(default=None, description="Comma-separated group IDs")
    expire: int | None = Field(default=None, ge=0, description="Expiry (epoch seconds, 0 = never)")
    enable: bool | None = None


class UserCreate(_UserOptions):
    """Create a user."""

    action: Literal["create"]
    userid: UserId
    password: str | None = Field(default=None, min_length=5)


class UserUpdate(_UserOptions):
    """Change a user's attributes."""

    action: Literal["update"]
    userid: UserId
    append: bool | None = Field(default=None, description="Add to groups instead of replacing")
    delete: str | None = Field(default=None, description="Settings to delete")
    digest: str | None = Field(default=None, max_length=64)


class UserDelete(Args):
    """Delete a user."""

    action: Literal["delete"]
    userid: UserId


def list_users(context: ExecutionContext, args: UserList) -> SuccessEnvelope:
    query = {"enabled": args.enabled} if args.enabled is not None else None
    users = ensure_list(context.client.request("/access/users", "GET", query), "user list")
    out = heading("Users")
    if not users:
        return ok(out + "No users found.")
    for user in users:
        state = "enabled" if user.get("enable", 1) else "disabled"
        out += f"- **{user.get('userid', 'unknown')}** ({state})"
        if user.get("email"):
            out += f" - {user['email']}"
        if user.get("comment"):
            out += f" - {user['comment']}"
        out += "\n"
    return ok(out + f"\n**Total**: {len(users)} user(s)")


def get_user(context: ExecutionContext, args: UserGet) -> SuccessEnvelope:
    user = ensure_mapping(context.client.request(f"/access/users/{segment(args.userid)}"), "user")
    return ok(details(f"User {args.userid}", user, skip=("digest",)))


def create_user(context: ExecutionContext, args: UserCreate) -> SuccessEnvelope:
    result = context.client.request("/access/users", "POST", body_of(args))
    out = heading("User Created")
    out += bullet("User", args.userid)
    return ok(out + task_result(result).rstrip("\n"))


def update_user(context: ExecutionContext, args: UserUpdate) -> SuccessEnvelope:
    payload = body_of(args, exclude=("userid",))
    result = context.client.request(f"/access/users/{segment(args.userid)}", "PUT", payload)
    out = heading("User Updated")
    out += bullet("User", args.userid)
    return ok(out + task_result(result).rstrip("\n"))


def delete_user(context: ExecutionContext, args: UserDelete) -> SuccessEnvelope:
    result = context.client.request(f"/access/users/{segment(args.userid)}", "DELETE")
    out = heading("User Deleted")
    out += bullet("User", args.userid)
    return ok(out + task_result(result).rstrip("\n"))


USER_ROUTER = ActionRouter(
    "action",
    [
        Action("list", UserList, list_users, label="List Users"),
        Action("get", UserGet, get_user, label="Get User"),
        Action("create", UserCreate, create_user, label="Create User", elevated=True),
        Action("update", UserUpdate, update_user, label="Update User", elevated=True),
        Action("delete", UserDelete, delete_user, label="Delete User", elevated=True),
    ],
)

DESCRIPTORS = (
    CommandDescriptor.consolidated(
        CommandName.USER,
        "List, inspect, create, update or delete access control users.",
        category=CommandCategory.ACCESS,
        router=USER_ROUTER,
        label="User",
    ),
)
