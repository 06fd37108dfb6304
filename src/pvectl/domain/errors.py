"""Failure taxonomy for command execution.

INVARIANT: The taxonomy is closed. Every failure surfaced by the command
surface is one of the four :class:`FailureKind` values; all of them collapse
into the same error envelope at the invocation boundary and differ only in
message text.

``UnknownCommandError``, ``ValidationFailure`` and ``PermissionDeniedError``
are raised before any remote call is issued. ``DownstreamError`` happens after
one has been issued and is never retried or masked.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class FailureKind(StrEnum):
    """Classification carried by every error envelope."""

    UNKNOWN_COMMAND = "unknown_command"
    VALIDATION = "validation"
    PERMISSION_DENIED = "permission_denied"
    DOWNSTREAM = "downstream"


class CommandError(Exception):
    """Base class for classified command failures."""

    kind: FailureKind = FailureKind.DOWNSTREAM


class UnknownCommandError(CommandError):
    """The requested command name is not in the registry."""

    kind = FailureKind.UNKNOWN_COMMAND

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f'Unknown command "{name}". Use the command listing to see available commands.'
        )


@dataclass(frozen=True)
class FieldIssue:
    """One violated constraint: dotted field path plus message."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class ValidationFailure(CommandError):
    """Input rejected by a command schema.

    Carries one :class:`FieldIssue` per violated constraint, never only the
    first one.
    """

    kind = FailureKind.VALIDATION

    def __init__(self, issues: list[FieldIssue]) -> None:
        self.issues = list(issues)
        super().__init__("; ".join(str(issue) for issue in self.issues) or "invalid input")

    @property
    def fields(self) -> list[str]:
        return [issue.path for issue in self.issues]


class PermissionDeniedError(CommandError):
    """A mutating action was attempted without elevated permissions."""

    kind = FailureKind.PERMISSION_DENIED

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Permission denied: {action} requires elevated permissions")


class DownstreamError(CommandError):
    """The remote call was rejected or could not be completed."""

    kind = FailureKind.DOWNSTREAM


def classify(error: BaseException) -> FailureKind:
    """Return the failure kind for *error*.

    Unclassified exceptions raised by a handler happen after the handler took
    over, so they are reported as downstream failures.
    """
    if isinstance(error, CommandError):
        return error.kind
    return FailureKind.DOWNSTREAM
