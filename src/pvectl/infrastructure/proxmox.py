"""ProxmoxClient — the single remote-call collaborator.

Wraps an ``httpx.Client`` bound to ``https://<host>:<port>/api2/json`` and
authenticated with an API token. Every reply is unwrapped from its
``{"data": ...}`` envelope; every failure is raised as
:class:`ProxmoxApiError`, which the dispatcher classifies as a downstream
failure. Requests are never retried.
"""

from __future__ import annotations

import json
import ssl
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from pvectl.config.discovery import ConfigurationError
from pvectl.domain.errors import DownstreamError

if TYPE_CHECKING:
    from pvectl.config.models import ProxmoxConfig, TlsConfig

logger = structlog.get_logger(__name__)

_FORM_METHODS = frozenset({"POST", "PUT"})


class ProxmoxApiError(DownstreamError):
    """A Proxmox API call failed.

    Attributes:
        status_code: HTTP status, or 0 when no usable response arrived.
        endpoint: API path relative to ``/api2/json``.
    """

    def __init__(self, message: str, status_code: int, endpoint: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


def encode_form_value(value: Any) -> str:
    """Encode one body value the way the Proxmox API expects it.

    Examples:
        >>> encode_form_value(True)
        '1'
        >>> encode_form_value({"a": 1})
        '{"a":1}'
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def to_form_params(body: Any) -> list[tuple[str, str]]:
    """Flatten *body* into ordered form pairs.

    ``None`` values are dropped and list values become repeated keys.
    Anything that is not a mapping yields no pairs.
    """
    if not isinstance(body, Mapping):
        return []
    pairs: list[tuple[str, str]] = []
    for key, value in body.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, encode_form_value(item)) for item in value)
            continue
        pairs.append((key, encode_form_value(value)))
    return pairs


def _verify_for(tls: TlsConfig) -> ssl.SSLContext | bool:
    if tls.mode == "insecure":
        return False
    if tls.mode == "verify" and tls.ca_cert is not None:
        try:
            return ssl.create_default_context(cafile=str(tls.ca_cert))
        except OSError as exc:
            msg = f"Cannot load tls.ca_cert {tls.ca_cert}: {exc}"
            raise ConfigurationError(msg) from exc
    return True


class ProxmoxClient:
    """Synchronous Proxmox VE API client.

    The underlying ``httpx.Client`` is thread-safe, so one instance is
    shared by every concurrent invocation.
    """

    def __init__(
        self,
        proxmox: ProxmoxConfig,
        tls: TlsConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        token = proxmox.token_value.get_secret_value() if proxmox.token_value else ""
        self.base_url = f"https://{proxmox.host}:{proxmox.port}/api2/json"
        self._http = httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": f"PVEAPIToken={proxmox.user}!{proxmox.token_name}={token}",
            },
            verify=_verify_for(tls),
            timeout=proxmox.timeout_seconds,
            transport=transport,
        )

    def request(self, path: str, method: str = "GET", body: Any = None) -> Any:
        """Issue one API call and return the unwrapped ``data`` member.

        POST and PUT bodies are form-encoded; GET and DELETE bodies are sent
        as query parameters.

        Raises:
            ProxmoxApiError: Non-2xx status, empty or unparsable reply, or
                a transport failure (including timeouts).
        """
        method = method.upper()
        pairs = to_form_params(body)
        kwargs: dict[str, Any] = {}
        if method in _FORM_METHODS:
            form: dict[str, list[str]] = {}
            for key, value in pairs:
                form.setdefault(key, []).append(value)
            kwargs["data"] = form
        elif pairs:
            kwargs["params"] = pairs

        logger.debug("proxmox.request", method=method, endpoint=path)
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("proxmox.error", endpoint=path, error=str(exc))
            msg = f"Failed to connect to Proxmox: {str(exc) or type(exc).__name__}"
            raise ProxmoxApiError(msg, 0, path) from exc

        if response.is_error:
            logger.error(
                "proxmox.error",
                endpoint=path,
                status_code=response.status_code,
                error=response.text,
            )
            msg = f"Proxmox API error: {response.status_code} - {response.text}"
            raise ProxmoxApiError(msg, response.status_code, path)

        text = response.text
        if not text.strip():
            raise ProxmoxApiError("Empty response from Proxmox API", 0, path)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"Failed to parse Proxmox API response: {exc}"
            raise ProxmoxApiError(msg, 0, path) from exc

        if isinstance(payload, Mapping):
            return payload.get("data")
        return payload

    def close(self) -> None:
        self._http.close()
