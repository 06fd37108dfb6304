"""Where pvectl looks for its TOML config.

An explicit path (``--config`` or ``PVECTL_CONFIG``) wins and must name an
existing file. Otherwise the first existing file in this order is used:

1. ``pvectl.toml`` in the working directory or any parent, so a checkout
   can carry the settings for the cluster it manages
2. ``$XDG_CONFIG_HOME/pvectl/config.toml`` (``~/.config`` when unset)
3. ``/etc/pvectl/config.toml``, for an install on the Proxmox host itself

With none of them present, pvectl runs on environment variables and
defaults alone.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "pvectl.toml"
CONFIG_ENV_VAR = "PVECTL_CONFIG"
SYSTEM_CONFIG = Path("/etc/pvectl/config.toml")


class ConfigurationError(ValueError):
    """Settings are valid on their own but insufficient for the requested use."""


def user_config_path() -> Path:
    """Per-user config file, honouring ``XDG_CONFIG_HOME``."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "pvectl" / "config.toml"


def explicit_config(path: str | Path, *, source: str) -> Path:
    """Return *path* when it names a file; raise :class:`ConfigurationError` otherwise.

    *source* says where the path came from (``--config``, ``PVECTL_CONFIG``)
    so the message points at the setting to fix.
    """
    candidate = Path(path).expanduser()
    if not candidate.is_file():
        raise ConfigurationError(f"Config file not found: {path} (from {source})")
    return candidate


def search_path(start: Path | None = None) -> list[Path]:
    """Candidate files in lookup order: walk-up, then user, then system."""
    current = (start or Path.cwd()).resolve()
    candidates = [current / CONFIG_FILENAME]
    candidates.extend(parent / CONFIG_FILENAME for parent in current.parents)
    candidates.append(user_config_path())
    candidates.append(SYSTEM_CONFIG)
    return candidates


def find_config(start: Path | None = None) -> Path | None:
    """Locate the config file for a run started in *start* (default: cwd).

    Returns None when no file exists anywhere on the search path.
    Raises ConfigurationError when ``PVECTL_CONFIG`` names a missing file.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return explicit_config(env_path, source=CONFIG_ENV_VAR)
    return next((path for path in search_path(start) if path.is_file()), None)


def describe_search(start: Path | None = None) -> str:
    current = (start or Path.cwd()).resolve()
    return (
        f"{CONFIG_FILENAME} in {current} and its parents, "
        f"{user_config_path()}, {SYSTEM_CONFIG}"
    )
