"""Tests for shared field types."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, ValidationError

from pvectl.domain.types import GuestType, NodeName, StorageId, VmId


class _Target(BaseModel):
    node: NodeName
    vmid: VmId
    storage: StorageId = "local"


class TestGuestType:
    def test_api_segment(self) -> None:
        assert GuestType.VM.api_segment == "qemu"
        assert GuestType.LXC.api_segment == "lxc"


class TestFieldConstraints:
    def test_valid_values(self) -> None:
        target = _Target(node="pve-01", vmid=100, storage="local-lvm.2")
        assert target.vmid == 100

    def test_vmid_digits_string_is_coerced(self) -> None:
        assert _Target(node="pve", vmid="101").vmid == 101

    @pytest.mark.parametrize("vmid", [99, 1_000_000_000, -1])
    def test_vmid_out_of_range(self, vmid: int) -> None:
        with pytest.raises(ValidationError):
            _Target(node="pve", vmid=vmid)

    @pytest.mark.parametrize("node", ["", "pve 1", "pve/1", "x" * 65])
    def test_bad_node_names(self, node: str) -> None:
        with pytest.raises(ValidationError):
            _Target(node=node, vmid=100)

    def test_bad_storage_id(self) -> None:
        with pytest.raises(ValidationError):
            _Target(node="pve", vmid=100, storage="local/../etc")


class TestPublicNames:
    def test_every_exported_type_is_used_by_a_command(self) -> None:
        import inspect

        from pvectl.domain import types
        from pvectl.operations import cluster, guests, nodes, snapshots, storage

        assert sorted(types.__all__) == [
            "GuestFilter",
            "GuestType",
            "NodeName",
            "StorageId",
            "VmId",
        ]
        sources = "".join(
            inspect.getsource(module)
            for module in (cluster, guests, nodes, snapshots, storage)
        )
        for name in types.__all__:
            assert name in sources
