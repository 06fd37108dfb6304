"""Shared pytest fixtures and test helpers for pvectl tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from pvectl.services.context import ExecutionContext
from pvectl.services.dispatch import Dispatcher
from pvectl.services.registry import CommandRegistry, default_registry


class FakeClient:
    """Recording stand-in for the Proxmox client.

    ``responses`` maps ``path`` or ``(method, path)`` to the value returned;
    unmatched calls return None. When ``error`` is set, every call raises it
    (after being recorded).
    """

    def __init__(
        self,
        responses: dict[Any, Any] | None = None,
        *,
        error: BaseException | None = None,
    ) -> None:
        self.responses = dict(responses or {})
        self.error = error
        self.calls: list[tuple[str, str, Any]] = []

    def request(self, path: str, method: str = "GET", body: Any = None) -> Any:
        self.calls.append((path, method, body))
        if self.error is not None:
            raise self.error
        if (method, path) in self.responses:
            return self.responses[(method, path)]
        return self.responses.get(path)


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """No PVECTL_* variables and no config file on the search path."""
    import os

    for name in list(os.environ):
        if name.startswith("PVECTL_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setattr("pvectl.config.discovery.SYSTEM_CONFIG", tmp_path / "etc" / "config.toml")
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger and structlog state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pve = logging.getLogger("pvectl")
    pve_level = pve.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pve.setLevel(pve_level)
    structlog.reset_defaults()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def context(client: FakeClient) -> ExecutionContext:
    """Context without elevated permissions."""
    return ExecutionContext(client=client, allow_elevated=False)


@pytest.fixture
def elevated_context(client: FakeClient) -> ExecutionContext:
    """Context with elevated permissions."""
    return ExecutionContext(client=client, allow_elevated=True)


@pytest.fixture
def registry() -> CommandRegistry:
    return default_registry()


@pytest.fixture
def dispatcher(registry: CommandRegistry, context: ExecutionContext) -> Dispatcher:
    return Dispatcher(registry, context)


@pytest.fixture
def elevated_dispatcher(
    registry: CommandRegistry, elevated_context: ExecutionContext
) -> Dispatcher:
    return Dispatcher(registry, elevated_context)


@pytest.fixture
def api_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Complete Proxmox connection settings via environment variables."""
    monkeypatch.setenv("PVECTL_PROXMOX__HOST", "pve.example.test")
    monkeypatch.setenv("PVECTL_PROXMOX__TOKEN_NAME", "ci")
    monkeypatch.setenv("PVECTL_PROXMOX__TOKEN_VALUE", "s3cret")


@pytest.fixture
def make_context() -> Any:
    """Factory: ``make_context(responses, error=..., elevated=...) -> (context, client)``."""

    def _make(
        responses: dict[Any, Any] | None = None,
        *,
        error: BaseException | None = None,
        elevated: bool = False,
    ) -> tuple[ExecutionContext, FakeClient]:
        fake = FakeClient(responses, error=error)
        return ExecutionContext(client=fake, allow_elevated=elevated), fake

    return _make


@pytest.fixture
def make_dispatcher(registry: CommandRegistry, make_context: Any) -> Any:
    """Factory: ``make_dispatcher(responses, error=..., elevated=...) -> (dispatcher, client)``."""

    def _make(
        responses: dict[Any, Any] | None = None,
        *,
        error: BaseException | None = None,
        elevated: bool = False,
    ) -> tuple[Dispatcher, FakeClient]:
        ctx, fake = make_context(responses, error=error, elevated=elevated)
        return Dispatcher(registry, ctx), fake

    return _make
