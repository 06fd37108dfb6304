"""ActionRouter — dispatch for consolidated commands.

A consolidated command folds several previously separate operations
(list/get/create/update/delete on one resource) under one name and
selects between them with a discriminator field (``action``,
``operation`` or ``type``).

INVARIANT: The arm table is the single source of truth. The tagged-union
schema used for validation is derived from it, so the discriminator's
literal set and the switch over it can never drift apart. Construction
fails (``RouterDefinitionError``) if an arm's schema does not declare the
discriminator as the single literal equal to the arm name, or if an arm
name is duplicated.

Usage::

    POOL_ROUTER = ActionRouter(
        "action",
        [
            Action("list", PoolList, list_pools, label="List Pools"),
            Action("create", PoolCreate, create_pool, label="Create Pool", elevated=True),
        ],
    )
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated, Any, Literal, Union, get_args, get_origin

import structlog
from pydantic import BaseModel, Field

from pvectl.services.permissions import require_elevated
from pvectl.services.validation import validate_or_raise

if TYPE_CHECKING:
    from pvectl.services.context import ExecutionContext
    from pvectl.services.result import Envelope

logger = structlog.get_logger(__name__)

Handler = Callable[["ExecutionContext", Any], "Envelope"]


class RouterDefinitionError(RuntimeError):
    """An arm table is inconsistent with its schemas."""


@dataclass(frozen=True)
class Action:
    """One arm of a consolidated command.

    Attributes:
        name: Discriminator literal selecting this arm.
        schema: Pydantic model for the arm (declares the discriminator).
        handler: ``(context, validated) -> Envelope``; performs one remote call.
        label: Human-readable operation label for errors and the gate.
        summary: One-line description for the command listing.
        elevated: Whether the arm mutates remote state.
    """

    name: str
    schema: type[BaseModel]
    handler: Handler
    label: str
    summary: str = ""
    elevated: bool = False


class ActionRouter:
    """Exhaustive switch over one discriminator field."""

    def __init__(self, discriminator: str, actions: Sequence[Action]) -> None:
        if not actions:
            msg = f"Router on {discriminator!r} needs at least one action"
            raise RouterDefinitionError(msg)

        arms: dict[str, Action] = {}
        for action in actions:
            if action.name in arms:
                msg = f"Duplicate action {action.name!r} on discriminator {discriminator!r}"
                raise RouterDefinitionError(msg)
            _check_tag(action, discriminator)
            arms[action.name] = action

        self.discriminator = discriminator
        self._arms: Mapping[str, Action] = MappingProxyType(arms)
        self._arm_types = tuple(action.schema for action in actions)

        if len(self._arm_types) == 1:
            self.schema: Any = self._arm_types[0]
        else:
            self.schema = Annotated[
                Union[self._arm_types],  # noqa: UP007
                Field(discriminator=discriminator),
            ]

    # ── Table access ──────────────────────────────────────────────────

    @property
    def actions(self) -> tuple[str, ...]:
        """Discriminator literals in declaration order."""
        return tuple(self._arms)

    @property
    def elevated(self) -> bool:
        """True if every arm mutates remote state."""
        return all(action.elevated for action in self._arms.values())

    def arm(self, name: str) -> Action:
        return self._arms[name]

    def arms(self) -> tuple[Action, ...]:
        return tuple(self._arms.values())

    def label_for(self, payload: Any) -> str | None:
        """Operation label of the arm *payload* selects, if it selects one."""
        tag = _read_tag(payload, self.discriminator)
        action = self._arms.get(tag) if isinstance(tag, str) else None
        return action.label if action else None

    # ── Dispatch ──────────────────────────────────────────────────────

    def route(self, context: ExecutionContext, payload: Any) -> Envelope:
        """Run exactly the arm selected by *payload*'s discriminator.

        *payload* is normally an arm model already narrowed by validation.
        Raw mappings are validated against the union first, and a
        ``ValidationFailure`` is raised if they do not fit.
        Elevated arms pass the capability gate before the handler runs.
        """
        if not isinstance(payload, self._arm_types):
            raw = payload.model_dump() if isinstance(payload, BaseModel) else payload
            payload = validate_or_raise(self.schema, raw)

        action = self._arms[getattr(payload, self.discriminator)]
        if action.elevated:
            require_elevated(context, action.label)

        logger.debug("router.dispatch", discriminator=self.discriminator, action=action.name)
        return action.handler(context, payload)

    # ── Listing ───────────────────────────────────────────────────────

    def json_schema(self) -> dict[str, Any]:
        """Machine-readable input shape derived from the arm schemas."""
        defs: dict[str, Any] = {}
        variants: list[dict[str, Any]] = []
        for action in self._arms.values():
            variant = action.schema.model_json_schema()
            defs.update(variant.pop("$defs", {}))
            if action.summary:
                variant["description"] = action.summary
            if action.elevated:
                variant["x-requires-elevated"] = True
            variants.append(variant)

        schema: dict[str, Any] = {
            "type": "object",
            "properties": {
                self.discriminator: {"type": "string", "enum": list(self._arms)},
            },
            "required": [self.discriminator],
            "oneOf": variants,
        }
        if defs:
            schema["$defs"] = defs
        return schema


def _check_tag(action: Action, discriminator: str) -> None:
    field = action.schema.model_fields.get(discriminator)
    if field is None:
        msg = f"Action {action.name!r}: {action.schema.__name__} has no {discriminator!r} field"
        raise RouterDefinitionError(msg)
    annotation = field.annotation
    if get_origin(annotation) is not Literal or get_args(annotation) != (action.name,):
        msg = (
            f"Action {action.name!r}: {action.schema.__name__}.{discriminator} "
            f"must be Literal[{action.name!r}], got {annotation!r}"
        )
        raise RouterDefinitionError(msg)


def _read_tag(payload: Any, discriminator: str) -> Any:
    if isinstance(payload, Mapping):
        return payload.get(discriminator)
    return getattr(payload, discriminator, None)
