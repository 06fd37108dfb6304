"""Click base classes shared by pvectl commands.

``PveCommand`` and ``PveGroup`` accept an ``examples`` argument shown by an
eager ``--examples`` flag instead of in ``--help``. Examples are literal
text or a zero-argument callable. Callables run only when the flag is
given, which lets ``tools call`` derive one sample invocation per
registered command from the command registry itself.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import click

if TYPE_CHECKING:
    from pvectl.services.registry import CommandDescriptor, CommandRegistry

Examples = str | Callable[[], str]


def _examples_option(examples: Examples) -> click.Option:
    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        text = examples() if callable(examples) else examples
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(text.rstrip("\n"))
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show_examples,
        help="Show usage examples and exit.",
    )


def sample_invocation(descriptor: CommandDescriptor) -> str:
    """One ``pvectl tools call`` line for *descriptor* with placeholder values.

    Consolidated commands use their first read-only arm (or the first arm
    when every arm is elevated). Required fields become ``-a field=<field>``.
    """
    assignments: list[str] = []
    schema = descriptor.schema
    discriminator = None
    if descriptor.router is not None:
        arms = descriptor.router.arms()
        arm = next((a for a in arms if not a.elevated), arms[0])
        discriminator = descriptor.router.discriminator
        assignments.append(f"{discriminator}={arm.name}")
        schema = arm.schema
    for name, field in schema.model_fields.items():
        if field.is_required() and name != discriminator:
            assignments.append(f"{name}=<{name}>")

    prefix = "pvectl --allow-elevated" if descriptor.requires_elevated else "pvectl"
    return f"{prefix} tools call {descriptor.name}" + "".join(f" -a {a}" for a in assignments)


def registry_examples(registry: CommandRegistry | None = None) -> str:
    """Sample invocations for every registered command, grouped by category."""
    if registry is None:
        from pvectl.services.registry import default_registry

        registry = default_registry()

    lines: list[str] = []
    for category, descriptors in registry.by_category().items():
        lines.append(f"  # {category}")
        lines.extend(f"  {sample_invocation(descriptor)}" for descriptor in descriptors)
        lines.append("")
    return "\n".join(lines).rstrip("\n")


class PveCommand(click.Command):
    """Click Command with an optional ``--examples`` flag."""

    def __init__(self, *args: Any, examples: Examples | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples is not None:
            self.params.append(_examples_option(examples))


class PveGroup(click.Group):
    """Click Group with an optional ``--examples`` flag.

    Subcommands default to :class:`PveCommand`, so ``@group.command`` accepts
    ``examples`` without ``cls=``.
    """

    command_class = PveCommand

    def __init__(self, *args: Any, examples: Examples | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples is not None:
            self.params.append(_examples_option(examples))
