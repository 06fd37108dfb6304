"""Rich Console factory and theme for pvectl output.

Creates Console instances that render to a StringIO buffer, so renderers
keep a ``render_*() -> str`` contract. In non-TTY environments (tests,
pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PVE_THEME = Theme(
    {
        "pve.ok": "bold green",
        "pve.error": "bold red",
        "pve.name": "bold cyan",
        "pve.category": "magenta",
        "pve.elevated": "bold yellow",
        "pve.basic": "green",
        "pve.key": "dim",
    }
)

_ACCESS_STYLES: dict[str, str] = {
    "basic": "pve.basic",
    "elevated": "pve.elevated",
    "mixed": "pve.elevated",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PVE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_access(access: str) -> str:
    """Return the Rich style name for an access level."""
    return _ACCESS_STYLES.get(access, "")
