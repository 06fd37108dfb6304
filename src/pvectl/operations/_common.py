"""Helpers shared by the leaf operation modules."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

from pvectl.domain.errors import DownstreamError

_TAG_FIELDS = frozenset({"action", "operation"})


class Args(BaseModel):
    """Base for every command input model.

    Frozen so a validated payload can be shared across threads. Unknown
    keys are ignored, and aliased fields accept either spelling.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)


def segment(value: Any) -> str:
    """URL-encode one path segment.

    Examples:
        >>> segment("root@pam")
        'root%40pam'
        >>> segment("a/b")
        'a%2Fb'
    """
    return quote(str(value), safe="")


def ensure_list(data: Any, what: str) -> list[Any]:
    """Return *data* as a list of records.

    A missing reply means zero items. Anything other than a list is a
    reply the caller cannot interpret, so it is raised as a downstream
    failure instead of being rendered as "nothing found".
    """
    if data is None:
        return []
    if isinstance(data, list):
        return data
    msg = f"Unexpected response for {what}: expected a list, got {type(data).__name__}"
    raise DownstreamError(msg)


def ensure_mapping(data: Any, what: str) -> Mapping[str, Any]:
    """Return *data* as a single record (``None`` becomes empty)."""
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return data
    msg = f"Unexpected response for {what}: expected an object, got {type(data).__name__}"
    raise DownstreamError(msg)


def body_of(args: BaseModel, *, exclude: Iterable[str] = ()) -> dict[str, Any]:
    """Request body from a validated model.

    Drops the discriminator, path parameters named in *exclude*, and
    unset optional fields; aliased fields use their API spelling.
    """
    skip = set(exclude) | (_TAG_FIELDS & set(type(args).model_fields))
    return args.model_dump(exclude=skip, exclude_none=True, by_alias=True)
