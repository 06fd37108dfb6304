"""Renderers for the command listing.

``render_command_table`` writes a Rich table to a StringIO console;
``render_command_docs`` produces a markdown reference of every command,
derived from the same input schemas the validator uses.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from rich.table import Table
from rich.text import Text

from pvectl.output.console import create_console, get_output, style_for_access


def access_of(entry: Mapping[str, Any]) -> str:
    """``basic``, ``elevated`` or ``mixed`` for one listing entry."""
    if entry.get("elevated"):
        return "elevated"
    schema = entry.get("inputSchema") or {}
    if any(variant.get("x-requires-elevated") for variant in schema.get("oneOf", ())):
        return "mixed"
    return "basic"


def render_command_table(entries: Iterable[Mapping[str, Any]]) -> str:
    """Render the command listing as a table."""
    console = create_console()
    table = Table(title="Commands", show_lines=False)
    table.add_column("Name", style="pve.name", no_wrap=True)
    table.add_column("Category", style="pve.category")
    table.add_column("Access")
    table.add_column("Actions")
    table.add_column("Description")

    count = 0
    for entry in entries:
        access = access_of(entry)
        table.add_row(
            entry["name"],
            entry["category"],
            Text(access, style=style_for_access(access)),
            ", ".join(entry.get("actions") or ()) or "-",
            entry["description"],
        )
        count += 1

    console.print(table)
    console.print(f"{count} command(s)", style="pve.key")
    return get_output(console).rstrip("\n")


def _type_of(prop: Mapping[str, Any]) -> str:
    if "enum" in prop:
        return " | ".join(str(v) for v in prop["enum"])
    if "const" in prop:
        return str(prop["const"])
    if "$ref" in prop:
        return str(prop["$ref"]).rsplit("/", 1)[-1]
    if "anyOf" in prop:
        kinds = [_type_of(option) for option in prop["anyOf"] if option.get("type") != "null"]
        return " | ".join(kinds) or "any"
    return str(prop.get("type", "any"))


def _field_table(schema: Mapping[str, Any], *, skip: str | None = None) -> list[str]:
    properties: Mapping[str, Any] = schema.get("properties") or {}
    required = set(schema.get("required") or ())
    rows = [
        f"| `{name}` | {_type_of(prop)} | {'yes' if name in required else 'no'} "
        f"| {prop.get('description', '')} |"
        for name, prop in properties.items()
        if name != skip
    ]
    if not rows:
        return ["_No parameters._"]
    return ["| Field | Type | Required | Description |", "|---|---|---|---|", *rows]


def render_command_docs(entries: Iterable[Mapping[str, Any]]) -> str:
    """Markdown reference for every command, grouped by category."""
    by_category: dict[str, list[Mapping[str, Any]]] = {}
    for entry in entries:
        by_category.setdefault(entry["category"], []).append(entry)

    lines = ["# pvectl command reference", ""]
    for category, group in by_category.items():
        lines += [f"## {category}", ""]
        for entry in group:
            lines += [f"### `{entry['name']}`", "", entry["description"], ""]
            lines += [f"**Access**: {access_of(entry)}", ""]
            schema = entry.get("inputSchema") or {}
            variants = schema.get("oneOf")
            if not variants:
                lines += [*_field_table(schema), ""]
                continue
            discriminator = (schema.get("required") or ["action"])[0]
            for variant, tag in zip(variants, entry.get("actions") or (), strict=False):
                marker = " (elevated)" if variant.get("x-requires-elevated") else ""
                lines += [f"#### `{discriminator}: {tag}`{marker}", ""]
                if variant.get("description"):
                    lines += [variant["description"], ""]
                lines += [*_field_table(variant, skip=discriminator), ""]
    return "\n".join(lines).rstrip("\n") + "\n"
