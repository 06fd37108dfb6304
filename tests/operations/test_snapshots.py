"""Tests for proxmox_guest_snapshot."""

from __future__ import annotations

from typing import Any

from pvectl.domain.errors import FailureKind

VM = {"type": "vm", "node": "pve1", "vmid": 100}
CT = {"type": "lxc", "node": "pve1", "vmid": 101}


class TestSnapshotList:
    def test_skips_current(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(
            {
                "/nodes/pve1/qemu/100/snapshot": [
                    {"name": "current", "parent": "before"},
                    {"name": "before", "description": "pre-upgrade\n"},
                ]
            }
        )
        text = dispatcher.invoke("proxmox_guest_snapshot", {"operation": "list", **VM}).text
        assert "- **before** - pre-upgrade" in text
        assert "current" not in text
        assert text.endswith("1 snapshot(s)")
        assert client.calls == [("/nodes/pve1/qemu/100/snapshot", "GET", None)]

    def test_only_current(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher({"/nodes/pve1/lxc/101/snapshot": [{"name": "current"}]})
        text = dispatcher.invoke("proxmox_guest_snapshot", {"operation": "list", **CT}).text
        assert text.endswith("No snapshots found.")


class TestSnapshotMutations:
    def test_create_vm_with_state(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(elevated=True)
        dispatcher.invoke(
            "proxmox_guest_snapshot",
            {"operation": "create", "snapname": "s1", "vmstate": True, "description": "d", **VM},
        )
        assert client.calls == [
            (
                "/nodes/pve1/qemu/100/snapshot",
                "POST",
                {"snapname": "s1", "description": "d", "vmstate": True},
            )
        ]

    def test_create_container_ignores_vmstate(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(elevated=True)
        dispatcher.invoke(
            "proxmox_guest_snapshot",
            {"operation": "create", "snapname": "s1", "vmstate": True, **CT},
        )
        assert client.calls == [("/nodes/pve1/lxc/101/snapshot", "POST", {"snapname": "s1"})]

    def test_rollback(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(elevated=True)
        envelope = dispatcher.invoke(
            "proxmox_guest_snapshot", {"operation": "rollback", "snapname": "s1", **VM}
        )
        assert "**Snapshot Rollback Started**" in envelope.text
        assert client.calls == [("/nodes/pve1/qemu/100/snapshot/s1/rollback", "POST", None)]

    def test_delete(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(elevated=True)
        dispatcher.invoke(
            "proxmox_guest_snapshot", {"operation": "delete", "snapname": "s1", **CT}
        )
        assert client.calls == [("/nodes/pve1/lxc/101/snapshot/s1", "DELETE", None)]

    def test_denied(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher()
        envelope = dispatcher.invoke(
            "proxmox_guest_snapshot", {"operation": "delete", "snapname": "s1", **VM}
        )
        assert envelope.failure is FailureKind.PERMISSION_DENIED
        assert "Delete Snapshot" in envelope.text
        assert client.calls == []


class TestSnapshotValidation:
    def test_name_must_start_with_letter(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher(elevated=True)
        envelope = dispatcher.invoke(
            "proxmox_guest_snapshot", {"operation": "create", "snapname": "1st", **VM}
        )
        assert envelope.failure is FailureKind.VALIDATION
        assert "snapname" in envelope.text

    def test_missing_operation(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher()
        envelope = dispatcher.invoke("proxmox_guest_snapshot", VM)
        assert envelope.failure is FailureKind.VALIDATION
        assert "- operation:" in envelope.text

    def test_bad_guest_type(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher()
        envelope = dispatcher.invoke(
            "proxmox_guest_snapshot",
            {"operation": "list", "type": "qemu", "node": "n", "vmid": 100},
        )
        assert envelope.failure is FailureKind.VALIDATION
        assert "type" in envelope.text
