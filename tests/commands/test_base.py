"""Tests for the shared Click base classes and registry-derived examples."""

from __future__ import annotations

import click
from click.testing import CliRunner

from pvectl.commands._base import PveCommand, PveGroup, registry_examples, sample_invocation
from pvectl.services.registry import CommandRegistry


class TestSampleInvocation:
    def test_simple_command_lists_required_fields(self, registry: CommandRegistry) -> None:
        line = sample_invocation(registry["proxmox_get_node_status"])
        assert line == "pvectl tools call proxmox_get_node_status -a node=<node>"

    def test_simple_command_without_required_fields(self, registry: CommandRegistry) -> None:
        assert sample_invocation(registry["proxmox_get_nodes"]) == (
            "pvectl tools call proxmox_get_nodes"
        )

    def test_consolidated_command_uses_first_read_arm(self, registry: CommandRegistry) -> None:
        assert sample_invocation(registry["proxmox_pool"]) == (
            "pvectl tools call proxmox_pool -a action=list"
        )
        assert sample_invocation(registry["proxmox_node_service"]) == (
            "pvectl tools call proxmox_node_service -a action=list -a node=<node>"
        )

    def test_fully_elevated_command_needs_the_flag(self, registry: CommandRegistry) -> None:
        assert sample_invocation(registry["proxmox_guest_start"]) == (
            "pvectl --allow-elevated tools call proxmox_guest_start"
            " -a type=vm -a node=<node> -a vmid=<vmid>"
        )


class TestRegistryExamples:
    def test_one_line_per_command(self, registry: CommandRegistry) -> None:
        text = registry_examples(registry)
        calls = [line for line in text.splitlines() if "tools call" in line]
        assert len(calls) == len(registry) == 20

    def test_grouped_by_category(self, registry: CommandRegistry) -> None:
        text = registry_examples(registry)
        for category in registry.by_category():
            assert f"  # {category}" in text
        assert text.index("  # nodes") < text.index("proxmox_get_node_status")

    def test_defaults_to_process_registry(self) -> None:
        assert "proxmox_guest_snapshot -a operation=list" in registry_examples()


class TestExamplesOption:
    def test_callable_examples_only_run_on_demand(self) -> None:
        calls: list[int] = []

        def examples() -> str:
            calls.append(1)
            return "  demo run\n"

        @click.command(cls=PveCommand, examples=examples)
        def demo() -> None:
            click.echo("ran")

        runner = CliRunner()
        assert runner.invoke(demo, ["--help"]).exit_code == 0
        assert runner.invoke(demo, []).output == "ran\n"
        assert calls == []

        result = runner.invoke(demo, ["--examples"])
        assert result.exit_code == 0
        assert result.output == "Examples for 'demo':\n\n  demo run\n"
        assert calls == [1]

    def test_without_examples_no_flag(self) -> None:
        @click.group(cls=PveGroup)
        def grp() -> None:
            pass

        @grp.command()
        def sub() -> None:
            pass

        assert "--examples" not in CliRunner().invoke(grp, ["sub", "--help"]).output
        assert isinstance(grp.commands["sub"], PveCommand)
