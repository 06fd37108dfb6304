"""Command registry — the single source of truth for the command surface.

Maps every externally visible command name to a :class:`CommandDescriptor`
(schema + handler). Both the command listing and invocation read from it.

INVARIANT: The registry covers exactly the names declared in
:class:`CommandName`. Construction raises :class:`RegistryError` naming
every missing, unexpected, or duplicated name, so registration drift
fails at startup rather than at first invocation.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from functools import cache
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from pvectl.domain.commands import CommandCategory, CommandName
from pvectl.services.router import ActionRouter

if TYPE_CHECKING:
    from pvectl.services.context import ExecutionContext
    from pvectl.services.result import Envelope


class RegistryError(RuntimeError):
    """The registered descriptors do not match the declared command set."""


@dataclass(frozen=True)
class CommandDescriptor:
    """Schema + handler pair for one command.

    Simple commands carry a model *schema* and a *handler*. Consolidated
    commands are built with :meth:`consolidated` and delegate both schema
    and handler to their :class:`ActionRouter`.
    """

    name: str
    description: str
    category: CommandCategory
    schema: Any
    handler: Callable[[ExecutionContext, Any], Envelope]
    label: str
    elevated: bool = False
    router: ActionRouter | None = None

    @classmethod
    def simple(
        cls,
        name: str,
        description: str,
        *,
        category: CommandCategory,
        schema: type[BaseModel],
        handler: Callable[[ExecutionContext, Any], Envelope],
        label: str,
        elevated: bool = False,
    ) -> CommandDescriptor:
        return cls(
            name=str(name),
            description=description,
            category=category,
            schema=schema,
            handler=handler,
            label=label,
            elevated=elevated,
        )

    @classmethod
    def consolidated(
        cls,
        name: str,
        description: str,
        *,
        category: CommandCategory,
        router: ActionRouter,
        label: str,
    ) -> CommandDescriptor:
        return cls(
            name=str(name),
            description=description,
            category=category,
            schema=router.schema,
            handler=router.route,
            label=label,
            router=router,
        )

    @property
    def requires_elevated(self) -> bool:
        """True when every path through this command is gated."""
        if self.router is not None:
            return self.router.elevated
        return self.elevated

    def label_for(self, validated: Any) -> str:
        """Operation label for error messages about *validated*."""
        if self.router is not None:
            return self.router.label_for(validated) or self.label
        return self.label

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the expected input, derived from :attr:`schema`."""
        if self.router is not None:
            return self.router.json_schema()
        schema = dict(self.schema.model_json_schema())
        schema.setdefault("type", "object")
        schema.setdefault("properties", {})
        if self.elevated:
            schema["x-requires-elevated"] = True
        return schema


class CommandRegistry(Mapping[str, CommandDescriptor]):
    """Immutable name -> descriptor table with a completeness check."""

    def __init__(
        self,
        descriptors: Iterable[CommandDescriptor],
        *,
        expected: Iterable[str] = CommandName,
    ) -> None:
        items = list(descriptors)
        declared = {str(name) for name in expected}
        counts = Counter(d.name for d in items)

        duplicated = sorted(name for name, n in counts.items() if n > 1)
        missing = sorted(declared - counts.keys())
        unexpected = sorted(counts.keys() - declared)
        if duplicated or missing or unexpected:
            parts = [f"expected {len(declared)} commands, got {len(items)}"]
            if missing:
                parts.append(f"missing: {', '.join(missing)}")
            if unexpected:
                parts.append(f"unexpected: {', '.join(unexpected)}")
            if duplicated:
                parts.append(f"duplicated: {', '.join(duplicated)}")
            msg = "Command registry incomplete: " + "; ".join(parts)
            raise RegistryError(msg)

        self._table: Mapping[str, CommandDescriptor] = MappingProxyType(
            {d.name: d for d in items}
        )

    def __getitem__(self, name: str) -> CommandDescriptor:
        return self._table[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def by_category(self, category: str | None = None) -> dict[str, list[CommandDescriptor]]:
        """Descriptors grouped by category, in registration order."""
        groups: dict[str, list[CommandDescriptor]] = {}
        for descriptor in self._table.values():
            if category is not None and descriptor.category != category:
                continue
            groups.setdefault(str(descriptor.category), []).append(descriptor)
        return groups


def build_registry() -> CommandRegistry:
    """Assemble descriptors from every operations module and check completeness."""
    from pvectl.operations import all_descriptors

    return CommandRegistry(all_descriptors())


@cache
def default_registry() -> CommandRegistry:
    """The process-wide registry, built once on first use at startup."""
    return build_registry()
