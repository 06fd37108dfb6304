"""Markdown rendering helpers for command replies.

Leaf operations turn a Proxmox JSON reply into a markdown message with
these helpers; the dispatch core only requires that some text comes back.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_bytes(value: float | int) -> str:
    """Human-readable byte count.

    Examples:
        >>> format_bytes(0)
        '0 B'
        >>> format_bytes(1536)
        '1.5 KB'
        >>> format_bytes(1073741824)
        '1 GB'
    """
    if value <= 0:
        return "0 B"
    scaled = float(value)
    exponent = 0
    while scaled >= 1024 and exponent < len(_BYTE_UNITS) - 1:
        scaled /= 1024
        exponent += 1
    return f"{round(scaled, 2):g} {_BYTE_UNITS[exponent]}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_uptime(seconds: int | float) -> str:
    """Human-readable uptime.

    Examples:
        >>> format_uptime(42)
        '42 seconds'
        >>> format_uptime(3660)
        '1 hour, 1 minute'
        >>> format_uptime(90000)
        '1 day, 1 hour'
    """
    seconds = int(seconds)
    if seconds < 60:
        return _plural(seconds, "second")
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    parts: list[str] = []
    if days:
        parts.append(_plural(days, "day"))
    if hours:
        parts.append(_plural(hours, "hour"))
    if minutes and not days:
        parts.append(_plural(minutes, "minute"))
    return ", ".join(parts)


def format_percent(fraction: float) -> str:
    """Format a 0..1 fraction as a percentage with two decimals."""
    return f"{fraction * 100:.2f}%"


def format_value(value: Any) -> str:
    """Render a scalar or nested value on one line."""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    return str(value)


def heading(title: str) -> str:
    return f"**{title}**\n\n"


def bullet(label: str, value: Any) -> str:
    return f"- **{label}**: {format_value(value)}\n"


def task_result(result: Any) -> str:
    """Render the UPID / result returned by mutating endpoints."""
    return bullet("Result", result if result not in (None, "") else "OK")


def details(title: str, record: Mapping[str, Any], *, skip: Iterable[str] = ()) -> str:
    """Render a mapping as a bullet list, keys sorted."""
    hidden = set(skip)
    out = heading(title)
    if not record:
        return out + "No details returned."
    for key in sorted(record):
        if key in hidden:
            continue
        out += bullet(key, record[key])
    return out.rstrip("\n")


def listing(
    title: str,
    items: list[Mapping[str, Any]],
    *,
    key: str,
    noun: str,
    extra: Iterable[str] = (),
) -> str:
    """Render a list of records as one bullet per item plus a total.

    An empty list renders ``No <noun>s found.``; whether a reply was a list
    at all is checked before rendering (``pvectl.operations._common.ensure_list``).
    """
    out = heading(title)
    if not items:
        return out + f"No {noun}s found."
    columns = tuple(extra)
    for item in items:
        line = f"- **{item.get(key, 'unknown')}**"
        for column in columns:
            value = item.get(column)
            if value not in (None, ""):
                line += f" - {column}: {format_value(value)}"
        out += line + "\n"
    return out + f"\n**Total**: {len(items)} {noun}(s)"
