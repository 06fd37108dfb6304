"""Schema validation for command input.

``validate()`` is a pure function of (schema, raw input). It returns the
normalized pydantic value or a :class:`ValidationFailure` listing every
violated constraint in one pass. It never raises for bad input.

A *schema* is either a ``BaseModel`` subclass (simple commands) or an
``Annotated`` discriminated union built by :class:`ActionRouter`
(consolidated commands). Pydantic reads the discriminator first and
validates only the matching arm; a missing or unknown tag is reported
against the tag field itself.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from pvectl.domain.errors import FieldIssue, ValidationFailure

ROOT_PATH = "(input)"

_TAG_ERRORS = {"union_tag_not_found", "union_tag_invalid"}


@lru_cache(maxsize=None)
def adapter_for(schema: Any) -> TypeAdapter[Any]:
    """Return a cached ``TypeAdapter`` for *schema*."""
    return TypeAdapter(schema)


def discriminator_of(schema: Any) -> str | None:
    """Return the discriminator field name of a tagged-union schema, if any."""
    for meta in getattr(schema, "__metadata__", ()):
        name = getattr(meta, "discriminator", None)
        if isinstance(name, str):
            return name
    return None


def validate(schema: Any, raw: Any) -> Any:
    """Validate *raw* against *schema*.

    Returns the validated value, or a :class:`ValidationFailure` (returned,
    not raised) carrying one issue per violated constraint.
    """
    if not isinstance(raw, (Mapping, BaseModel)):
        kind = type(raw).__name__
        return ValidationFailure([FieldIssue(ROOT_PATH, f"Input should be an object, got {kind}")])

    try:
        return adapter_for(schema).validate_python(raw)
    except PydanticValidationError as exc:
        return ValidationFailure(_issues(exc, schema, raw))


def validate_or_raise(schema: Any, raw: Any) -> Any:
    """Like :func:`validate` but raises the failure."""
    outcome = validate(schema, raw)
    if isinstance(outcome, ValidationFailure):
        raise outcome
    return outcome


def _issues(exc: PydanticValidationError, schema: Any, raw: Any) -> list[FieldIssue]:
    discriminator = discriminator_of(schema)
    tag = _read_tag(raw, discriminator) if discriminator else None

    issues: list[FieldIssue] = []
    for error in exc.errors(include_url=False):
        loc = tuple(error["loc"])
        if discriminator and error["type"] in _TAG_ERRORS:
            issues.append(FieldIssue(discriminator, _tag_message(error, discriminator)))
            continue
        if tag is not None and loc and loc[0] == tag:
            loc = loc[1:]
        path = ".".join(str(part) for part in loc) or ROOT_PATH
        issues.append(FieldIssue(path, error["msg"]))
    return issues


def _read_tag(raw: Any, discriminator: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(discriminator)
    return getattr(raw, discriminator, None)


def _tag_message(error: Any, discriminator: str) -> str:
    ctx = error.get("ctx") or {}
    expected = ctx.get("expected_tags")
    if error["type"] == "union_tag_not_found":
        message = "Field required"
    else:
        message = f"Unknown value {ctx.get('tag')!r}"
    if expected:
        message += f" (expected one of: {expected})"
    return message
