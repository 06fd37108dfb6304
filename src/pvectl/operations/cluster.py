"""Cluster-wide commands: status, datacenter options, and the next free VMID."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from pvectl.domain.commands import CommandCategory, CommandName
from pvectl.domain.types import VmId
from pvectl.operations._common import Args, body_of, ensure_list, ensure_mapping
from pvectl.output.markdown import bullet, details, heading, task_result
from pvectl.services.context import ExecutionContext
from pvectl.services.registry import CommandDescriptor
from pvectl.services.result import SuccessEnvelope, ok
from pvectl.services.router import Action, ActionRouter


class ClusterStatus(Args):
    """Show cluster quorum and membership."""

    action: Literal["status"]


class ClusterOptions(Args):
    """Show datacenter-wide options."""

    action: Literal["options"]


class ClusterUpdateOptions(Args):
    """Change datacenter-wide options."""

    action: Literal["update_options"]
    console: Literal["applet", "vv", "html5", "xtermjs"] | None = None
    keyboard: str | None = Field(default=None, description="Default keyboard layout")
    language: str | None = Field(default=None, description="Default GUI language")
    email_from: str | None = Field(default=None, description="Sender address for notifications")
    http_proxy: str | None = Field(default=None, description="Proxy for outgoing HTTP requests")
    mac_prefix: str | None = Field(default=None, description="Prefix for generated MACs")
    max_workers: int | None = Field(default=None, ge=1, description="Bulk action worker limit")
    description: str | None = None
    delete: str | None = Field(default=None, description="Comma-separated options to reset")


def cluster_status(context: ExecutionContext, args: ClusterStatus) -> SuccessEnvelope:
    entries = ensure_list(context.client.request("/cluster/status"), "cluster status")
    out = heading("Cluster Status")
    if not entries:
        return ok(out + "No cluster status returned.")
    for entry in entries:
        if entry.get("type") == "cluster":
            out += bullet("Cluster", entry.get("name", "unknown"))
            out += bullet("Quorate", bool(entry.get("quorate")))
            out += bullet("Nodes", entry.get("nodes", 0))
    for entry in entries:
        if entry.get("type") == "node":
            state = "online" if entry.get("online") else "offline"
            out += f"- **{entry.get('name', 'unknown')}** ({state})"
            if entry.get("ip"):
                out += f" - ip: {entry['ip']}"
            out += "\n"
    return ok(out.rstrip("\n"))


def cluster_options(context: ExecutionContext, args: ClusterOptions) -> SuccessEnvelope:
    options = ensure_mapping(context.client.request("/cluster/options"), "cluster options")
    return ok(details("Cluster Options", options))


def update_cluster_options(
    context: ExecutionContext, args: ClusterUpdateOptions
) -> SuccessEnvelope:
    payload = body_of(args)
    result = context.client.request("/cluster/options", "PUT", payload)
    out = heading("Cluster Options Updated")
    for key in sorted(payload):
        out += bullet(key, payload[key])
    return ok(out + task_result(result).rstrip("\n"))


CLUSTER_ROUTER = ActionRouter(
    "action",
    [
        Action("status", ClusterStatus, cluster_status, label="Get Cluster Status"),
        Action("options", ClusterOptions, cluster_options, label="Get Cluster Options"),
        Action(
            "update_options",
            ClusterUpdateOptions,
            update_cluster_options,
            label="Update Cluster Options",
            elevated=True,
        ),
    ],
)


class NextVmidArgs(Args):
    vmid: VmId | None = Field(default=None, description="Check whether this ID is free")


def get_next_vmid(context: ExecutionContext, args: NextVmidArgs) -> SuccessEnvelope:
    query = {"vmid": args.vmid} if args.vmid is not None else None
    vmid = context.client.request("/cluster/nextid", "GET", query)
    return ok(heading("Next Available VM ID") + bullet("VMID", vmid))


DESCRIPTORS = (
    CommandDescriptor.consolidated(
        CommandName.CLUSTER,
        "Query cluster status and datacenter options, or update the options.",
        category=CommandCategory.CLUSTER,
        router=CLUSTER_ROUTER,
        label="Cluster",
    ),
    CommandDescriptor.simple(
        CommandName.GET_NEXT_VMID,
        "Get the next free VM/container ID, or check that a given ID is free.",
        category=CommandCategory.CLUSTER,
        schema=NextVmidArgs,
        handler=get_next_vmid,
        label="Get Next VMID",
    ),
)
