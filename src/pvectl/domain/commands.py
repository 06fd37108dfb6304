"""The closed set of externally visible command names.

INVARIANT: This enum is declared independently of the registry. The
registry refuses to build unless its descriptors cover exactly these
names, so a command declared here but never wired (or wired under the
wrong name) aborts startup instead of surfacing at first invocation.
"""

from __future__ import annotations

from enum import StrEnum


class CommandName(StrEnum):
    """Every command exposed to callers."""

    # Nodes
    GET_NODES = "proxmox_get_nodes"
    GET_NODE_STATUS = "proxmox_get_node_status"
    NODE_SERVICE = "proxmox_node_service"
    NODE_DISK = "proxmox_node_disk"

    # Cluster
    CLUSTER = "proxmox_cluster"
    GET_NEXT_VMID = "proxmox_get_next_vmid"

    # Guests
    GUEST_LIST = "proxmox_guest_list"
    GUEST_STATUS = "proxmox_guest_status"
    GUEST_CONFIG = "proxmox_guest_config"
    GUEST_START = "proxmox_guest_start"
    GUEST_STOP = "proxmox_guest_stop"
    GUEST_REBOOT = "proxmox_guest_reboot"
    GUEST_SHUTDOWN = "proxmox_guest_shutdown"
    GUEST_DELETE = "proxmox_guest_delete"
    GUEST_SNAPSHOT = "proxmox_guest_snapshot"

    # Storage & pools
    STORAGE_CONFIG = "proxmox_storage_config"
    POOL = "proxmox_pool"

    # SDN
    SDN_VNET = "proxmox_sdn_vnet"

    # Access control
    USER = "proxmox_user"

    # High availability
    HA_RESOURCE = "proxmox_ha_resource"


class CommandCategory(StrEnum):
    """Grouping used by the command listing."""

    NODES = "nodes"
    CLUSTER = "cluster"
    GUESTS = "guests"
    STORAGE = "storage"
    SDN = "sdn"
    ACCESS = "access"
    HA = "ha"
