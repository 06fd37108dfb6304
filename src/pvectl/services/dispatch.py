"""Dispatcher — the command invocation entry point.

INVARIANT: ``invoke()`` never raises. Unknown names, schema violations,
permission denials, remote failures, and unexpected handler exceptions
are all converted into an :class:`ErrorEnvelope` here. This is the single
trust boundary: the MCP adapter and the CLI only ever see envelopes.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog

from pvectl.domain.errors import CommandError, UnknownCommandError, ValidationFailure
from pvectl.services.permissions import require_elevated
from pvectl.services.result import ErrorEnvelope, SuccessEnvelope, fail
from pvectl.services.validation import validate

if TYPE_CHECKING:
    from pvectl.services.context import ExecutionContext
    from pvectl.services.registry import CommandRegistry
    from pvectl.services.result import Envelope

logger = structlog.get_logger(__name__)


class Dispatcher:
    """Resolve, validate, gate, and run one command per call.

    Holds only the immutable registry and the read-only context, so one
    instance serves any number of concurrent invocations.
    """

    def __init__(self, registry: CommandRegistry, context: ExecutionContext) -> None:
        self._registry = registry
        self._context = context

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def context(self) -> ExecutionContext:
        return self._context

    def invoke(self, name: str, raw_args: Any = None) -> Envelope:
        """Run command *name* with *raw_args* and return its envelope."""
        started = time.perf_counter()
        log = logger.bind(command=name)

        descriptor = self._registry.get(name)
        if descriptor is None:
            log.info("command.unknown")
            return fail(UnknownCommandError(name), name)

        outcome = validate(descriptor.schema, {} if raw_args is None else raw_args)
        if isinstance(outcome, ValidationFailure):
            log.info("command.invalid", fields=outcome.fields)
            return fail(outcome, name)

        label = descriptor.label_for(outcome)
        log.debug("command.invoke", operation=label)
        try:
            if descriptor.elevated:
                require_elevated(self._context, label)
            envelope = descriptor.handler(self._context, outcome)
        except CommandError as exc:
            envelope = fail(exc, label)
        except Exception as exc:
            log.exception("command.crashed", operation=label)
            envelope = fail(exc, label)

        if not isinstance(envelope, (SuccessEnvelope, ErrorEnvelope)):
            msg = f"Handler returned {type(envelope).__name__}, expected an envelope"
            envelope = fail(TypeError(msg), label)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        if isinstance(envelope, ErrorEnvelope):
            log.info(
                "command.failed",
                operation=label,
                failure=str(envelope.failure),
                duration_ms=duration_ms,
            )
        else:
            log.debug("command.ok", operation=label, duration_ms=duration_ms)
        return envelope

    def describe(self, *, category: str | None = None) -> list[dict[str, Any]]:
        """Command listing: name, description, and input schema per command."""
        return describe_registry(self._registry, category=category)


def describe_registry(
    registry: CommandRegistry, *, category: str | None = None
) -> list[dict[str, Any]]:
    """Command listing derived from the registry (no client needed)."""
    return [
        {
            "name": descriptor.name,
            "description": descriptor.description,
            "category": str(descriptor.category),
            "elevated": descriptor.requires_elevated,
            "actions": list(descriptor.router.actions) if descriptor.router else [],
            "inputSchema": descriptor.input_schema(),
        }
        for descriptor in registry.values()
        if category is None or descriptor.category == category
    ]
