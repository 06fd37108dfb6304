"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PVECTL_*`` prefix, ``__`` between section and key
  3. TOML file    — walk-up ``pvectl.toml``, user or system config
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the config-file search of :mod:`pvectl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pvectl.config.discovery import ConfigurationError, explicit_config, find_config
from pvectl.config.models import McpConfig, PermissionsConfig, ProxmoxConfig, TlsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the TOML file chosen by :func:`find_config`."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class PveSettings(BaseSettings):
    """Unified settings for the pvectl CLI and MCP server.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PVECTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    proxmox: ProxmoxConfig = Field(default_factory=ProxmoxConfig)
    tls: TlsConfig = Field(default_factory=TlsConfig)
    permissions: PermissionsConfig = Field(default_factory=PermissionsConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> PveSettings:
        """Construct settings from a CLI invocation.

        Uses *config_path* when given, otherwise the file :func:`find_config`
        locates from *start* (default: cwd). *cli_flags* are merged
        as highest-priority overrides.
        """
        toml_path: Path | None
        if config_path:
            toml_path = explicit_config(config_path, source="--config")
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    def api_problems(self) -> list[str]:
        """Names of the settings still needed to reach the Proxmox API."""
        problems: list[str] = []
        if not self.proxmox.host:
            problems.append("proxmox.host")
        if not self.proxmox.token_name:
            problems.append("proxmox.token_name")
        if self.proxmox.token_value is None or not self.proxmox.token_value.get_secret_value():
            problems.append("proxmox.token_value")
        return problems

    def require_api(self) -> None:
        """Raise :class:`ConfigurationError` unless the API settings are complete."""
        problems = self.api_problems()
        if problems:
            env_names = ", ".join("PVECTL_" + name.upper().replace(".", "__") for name in problems)
            msg = (
                f"Missing Proxmox settings: {', '.join(problems)} "
                f"(set {env_names} or pvectl.toml)"
            )
            raise ConfigurationError(msg)
