"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pvectl.toml only contains overrides.
A working setup needs only [proxmox] host, token_name and token_value.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, model_validator

# --- pvectl.toml sections ---


class ProxmoxConfig(BaseModel):
    """[proxmox] section."""

    model_config = {"frozen": True}

    host: str | None = None
    port: int = Field(default=8006, ge=1, le=65535)
    user: str = "root@pam"
    token_name: str | None = None
    token_value: SecretStr | None = None
    timeout_seconds: float = Field(default=30.0, gt=0)


class TlsConfig(BaseModel):
    """[tls] section.

    ``strict`` verifies against the system trust store and ``insecure``
    disables certificate checks. ``verify`` pins the trust store to
    *ca_cert*. This is deliberately stricter than a plain verified
    connection: ``verify`` without an existing *ca_cert* file is a config
    error, never a fallback to the system store.
    """

    model_config = {"frozen": True}

    mode: Literal["strict", "verify", "insecure"] = "strict"
    ca_cert: Path | None = None

    @model_validator(mode="after")
    def _ca_cert_for_verify(self) -> TlsConfig:
        if self.mode == "verify" and self.ca_cert is None:
            msg = "tls.ca_cert is required when tls.mode is 'verify'"
            raise ValueError(msg)
        if self.mode == "verify" and self.ca_cert is not None and not self.ca_cert.is_file():
            msg = f"tls.ca_cert {self.ca_cert} does not exist"
            raise ValueError(msg)
        return self


class PermissionsConfig(BaseModel):
    """[permissions] section."""

    model_config = {"frozen": True}

    allow_elevated: bool = False


class McpConfig(BaseModel):
    """[mcp] section."""

    model_config = {"frozen": True}

    transport: Literal["stdio", "sse", "streamable-http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
