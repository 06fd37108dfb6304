"""Response envelopes — the universal command contract.

INVARIANT: Every invocation returns exactly one of two shapes,
:class:`SuccessEnvelope` or :class:`ErrorEnvelope`. There is no third
variant; a downstream failure is an ``ErrorEnvelope`` too.
Handlers build envelopes only through :func:`ok` and :func:`fail`.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from pvectl.domain.errors import FailureKind, ValidationFailure, classify

ELEVATION_HINT = (
    "Set PVECTL_PERMISSIONS__ALLOW_ELEVATED=true (or pass --allow-elevated) to enable."
)


class TextBlock(BaseModel):
    """One block of text content (markdown)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class _Envelope(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: list[TextBlock] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """All text blocks joined by newlines."""
        return "\n".join(block.text for block in self.content)

    def to_mcp(self) -> dict[str, Any]:
        """Serialize to the MCP ``CallToolResult`` shape."""
        return self.model_dump(mode="json", by_alias=True)


class SuccessEnvelope(_Envelope):
    """Successful command outcome."""

    is_error: Literal[False] = Field(default=False, alias="isError")


class ErrorEnvelope(_Envelope):
    """Failed command outcome.

    Attributes:
        failure: Internal classification; never serialized.
    """

    is_error: Literal[True] = Field(default=True, alias="isError")
    failure: FailureKind = Field(default=FailureKind.DOWNSTREAM, exclude=True)


Envelope = SuccessEnvelope | ErrorEnvelope


def ok(message: str) -> SuccessEnvelope:
    """Wrap a rendered message into a success envelope."""
    return SuccessEnvelope(content=[TextBlock(text=message)])


def fail(error: BaseException, context: str) -> ErrorEnvelope:
    """Wrap a caught failure into an error envelope.

    *context* is the command name for unknown-command and validation
    failures, and the human-readable operation label otherwise.
    """
    kind = classify(error)
    if kind is FailureKind.UNKNOWN_COMMAND:
        text = f"Error: {error}"
    elif kind is FailureKind.VALIDATION:
        lines = [f'Validation error for command "{context}":']
        if isinstance(error, ValidationFailure):
            lines.extend(f"- {issue}" for issue in error.issues)
        else:
            lines.append(f"- {error}")
        text = "\n".join(lines)
    elif kind is FailureKind.PERMISSION_DENIED:
        text = f"**Permission Denied** ({context})\n\n{error}\n\n{ELEVATION_HINT}"
    else:
        message = str(error) or type(error).__name__
        text = f"**Error in {context}**\n\n{message}"
    return ErrorEnvelope(content=[TextBlock(text=text)], failure=kind)
