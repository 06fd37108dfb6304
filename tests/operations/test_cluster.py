"""Tests for cluster commands."""

from __future__ import annotations

from typing import Any

from pvectl.domain.errors import FailureKind


class TestClusterStatus:
    def test_renders_cluster_and_nodes(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(
            {
                "/cluster/status": [
                    {"type": "cluster", "name": "lab", "quorate": 1, "nodes": 2},
                    {"type": "node", "name": "pve1", "online": 1, "ip": "10.0.0.1"},
                    {"type": "node", "name": "pve2", "online": 0},
                ]
            }
        )
        text = dispatcher.invoke("proxmox_cluster", {"action": "status"}).text
        assert "- **Cluster**: lab" in text
        assert "- **Quorate**: yes" in text
        assert "- **pve1** (online) - ip: 10.0.0.1" in text
        assert "- **pve2** (offline)" in text
        assert client.calls == [("/cluster/status", "GET", None)]

    def test_options(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher(
            {"/cluster/options": {"keyboard": "de", "console": "html5"}}
        )
        text = dispatcher.invoke("proxmox_cluster", {"action": "options"}).text
        assert text == "**Cluster Options**\n\n- **console**: html5\n- **keyboard**: de"


class TestClusterUpdate:
    def test_puts_only_given_options(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher(elevated=True)
        envelope = dispatcher.invoke(
            "proxmox_cluster", {"action": "update_options", "keyboard": "de", "max_workers": 4}
        )
        assert "- **keyboard**: de" in envelope.text
        assert client.calls == [
            ("/cluster/options", "PUT", {"keyboard": "de", "max_workers": 4})
        ]

    def test_denied(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher()
        envelope = dispatcher.invoke("proxmox_cluster", {"action": "update_options"})
        assert envelope.failure is FailureKind.PERMISSION_DENIED
        assert "Update Cluster Options" in envelope.text
        assert client.calls == []

    def test_console_choice_validated(self, make_dispatcher: Any) -> None:
        dispatcher, _ = make_dispatcher(elevated=True)
        envelope = dispatcher.invoke(
            "proxmox_cluster", {"action": "update_options", "console": "vnc"}
        )
        assert envelope.failure is FailureKind.VALIDATION
        assert "console" in envelope.text


class TestNextVmid:
    def test_without_hint(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher({"/cluster/nextid": "104"})
        text = dispatcher.invoke("proxmox_get_next_vmid", {}).text
        assert text == "**Next Available VM ID**\n\n- **VMID**: 104\n"
        assert client.calls == [("/cluster/nextid", "GET", None)]

    def test_with_hint(self, make_dispatcher: Any) -> None:
        dispatcher, client = make_dispatcher({"/cluster/nextid": "200"})
        dispatcher.invoke("proxmox_get_next_vmid", {"vmid": 200})
        assert client.calls == [("/cluster/nextid", "GET", {"vmid": 200})]
