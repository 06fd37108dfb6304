"""Tests for --examples flag on CLI commands.

Parametrized to cover all commands that define examples text.
"""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from pvectl.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["tools", "--examples"], ["pvectl tools list", "pvectl tools call proxmox_pool"]),
    (
        ["tools", "call", "--examples"],
        ["-a type=lxc", "--args", "# guests", "pvectl tools call proxmox_pool -a action=list"],
    ),
    (["check", "--examples"], ["pvectl --json check"]),
    (["serve", "--examples"], ["--transport streamable-http", "--allow-elevated"]),
]


@pytest.mark.parametrize(("args", "expected_keywords"), EXAMPLES_COMMANDS)
def test_examples(cli_runner: CliRunner, args: list[str], expected_keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Examples for" in result.output
    for keyword in expected_keywords:
        assert keyword in result.output


def test_examples_not_in_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["serve", "--help"])
    assert "--examples" in result.output
    assert "pvectl serve --transport" not in result.output
