"""Tests for node, service and disk commands."""

from __future__ import annotations

from typing import Any

from pvectl.domain.errors import FailureKind
from pvectl.services.result import SuccessEnvelope


class TestGetNodes:
    def test_lists_nodes(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(
            {
                "/nodes": [
                    {
                        "node": "pve1",
                        "status": "online",
                        "cpu": 0.25,
                        "mem": 1073741824,
                        "maxmem": 4294967296,
                        "uptime": 3660,
                    },
                    {"node": "pve2", "status": "offline"},
                ]
            }
        )
        envelope = dispatcher.invoke("proxmox_get_nodes", {})
        text = envelope.text
        assert text.startswith("**Cluster Nodes**")
        assert "- **pve1** (online)" in text
        assert "CPU: 25.00%" in text
        assert "Memory: 1 GB / 4 GB" in text
        assert "Uptime: 1 hour, 1 minute" in text
        assert "- **pve2** (offline)" in text
        assert text.endswith("**Total**: 2 node(s)")
        assert client.calls == [("/nodes", "GET", None)]

    def test_empty(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher({"/nodes": []})
        assert dispatcher.invoke("proxmox_get_nodes").text.endswith("No nodes found.")

    def test_non_list_reply_is_an_error(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher({"/nodes": {"node": "pve1"}})
        envelope = dispatcher.invoke("proxmox_get_nodes")
        assert envelope.failure is FailureKind.DOWNSTREAM
        assert "expected a list, got dict" in envelope.text


class TestNodeStatus:
    def test_renders_status(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(
            {
                "/nodes/pve1/status": {
                    "uptime": 90000,
                    "cpu": 0.5,
                    "memory": {"used": 1536, "total": 2048},
                    "loadavg": ["0.10", "0.20", "0.30"],
                    "pveversion": "pve-manager/8.2.2",
                }
            }
        )
        text = dispatcher.invoke("proxmox_get_node_status", {"node": "pve1"}).text
        assert "**Node pve1**" in text
        assert "- **Uptime**: 1 day, 1 hour" in text
        assert "- **Memory**: 1.5 KB / 2 KB" in text
        assert "- **Load Average**: 0.10, 0.20, 0.30" in text
        assert "pve-manager/8.2.2" in text
        assert client.calls == [("/nodes/pve1/status", "GET", None)]

    def test_node_name_validated(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher()
        envelope = dispatcher.invoke("proxmox_get_node_status", {"node": "bad/name"})
        assert envelope.failure is FailureKind.VALIDATION
        assert "node" in envelope.text
        assert client.calls == []


class TestNodeService:
    def test_list(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(
            {"/nodes/pve1/services": [{"name": "pveproxy", "state": "running"}]}
        )
        envelope = dispatcher.invoke("proxmox_node_service", {"action": "list", "node": "pve1"})
        assert "- **pveproxy** - state: running" in envelope.text
        assert client.calls == [("/nodes/pve1/services", "GET", None)]

    def test_control_posts_to_command_path(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(
            {("POST", "/nodes/pve1/services/pveproxy/restart"): "UPID:pve1:0001"}, elevated=True
        )
        envelope = dispatcher.invoke(
            "proxmox_node_service",
            {"action": "control", "node": "pve1", "service": "pveproxy", "command": "restart"},
        )
        assert isinstance(envelope, SuccessEnvelope)
        assert "- **Result**: UPID:pve1:0001" in envelope.text
        assert client.calls == [("/nodes/pve1/services/pveproxy/restart", "POST", None)]

    def test_control_requires_elevation(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher()
        envelope = dispatcher.invoke(
            "proxmox_node_service",
            {"action": "control", "node": "pve1", "service": "pveproxy", "command": "stop"},
        )
        assert envelope.failure is FailureKind.PERMISSION_DENIED
        assert "Control Node Service" in envelope.text
        assert client.calls == []

    def test_unknown_service_command(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher(elevated=True)
        envelope = dispatcher.invoke(
            "proxmox_node_service",
            {"action": "control", "node": "pve1", "service": "pveproxy", "command": "kill"},
        )
        assert envelope.failure is FailureKind.VALIDATION
        assert "command" in envelope.text


class TestNodeDisk:
    def test_list_sends_query(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(
            {
                "/nodes/pve1/disks/list": [
                    {"devpath": "/dev/sda", "size": 1073741824, "type": "ssd"}
                ]
            }
        )
        envelope = dispatcher.invoke(
            "proxmox_node_disk",
            {"action": "list", "node": "pve1", "type": "unused", "include-partitions": True},
        )
        assert "- **/dev/sda** - 1 GB - type: ssd" in envelope.text
        path, method, query = client.calls[0]
        assert (path, method) == ("/nodes/pve1/disks/list", "GET")
        assert query == {"type": "unused", "include-partitions": True}

    def test_smart(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(
            {
                "/nodes/pve1/disks/smart": {
                    "health": "PASSED",
                    "attributes": [{"name": "Temp", "raw": "35"}],
                }
            }
        )
        envelope = dispatcher.invoke(
            "proxmox_node_disk", {"action": "smart", "node": "pve1", "disk": "/dev/nvme0n1"}
        )
        assert "- **Health**: PASSED" in envelope.text
        assert "- Temp: 35" in envelope.text
        assert client.calls[0][2]["disk"] == "/dev/nvme0n1"

    def test_smart_rejects_non_device_path(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher()
        envelope = dispatcher.invoke(
            "proxmox_node_disk", {"action": "smart", "node": "pve1", "disk": "sda"}
        )
        assert envelope.failure is FailureKind.VALIDATION
        assert "disk" in envelope.text

    def test_lvm_reads_children(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher(
            {"/nodes/pve1/disks/lvm": {"children": [{"name": "pve", "size": 2048, "free": 1024}]}}
        )
        text = dispatcher.invoke("proxmox_node_disk", {"action": "lvm", "node": "pve1"}).text
        assert "- **pve** - size: 2 KB - free: 1 KB" in text
        assert text.endswith("1 volume group(s)")

    def test_zfs_empty(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher({"/nodes/pve1/disks/zfs": []})
        text = dispatcher.invoke("proxmox_node_disk", {"action": "zfs", "node": "pve1"}).text
        assert text.endswith("No ZFS pools found.")
