"""Capability gate separating read-only from mutating operations.

The gate consults exactly one boolean on the :class:`ExecutionContext`.
No roles, scopes, or per-resource ACLs: it is a global kill-switch.

INVARIANT: The gate runs strictly before any remote call. Callers never
invoke it from leaf handlers; the :class:`ActionRouter` applies it to
every arm flagged ``elevated`` and the :class:`Dispatcher` applies it to
every simple command flagged ``elevated``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pvectl.domain.errors import PermissionDeniedError

if TYPE_CHECKING:
    from pvectl.services.context import ExecutionContext


def require_elevated(context: ExecutionContext, action: str) -> None:
    """Raise :class:`PermissionDeniedError` unless elevated operations are allowed."""
    if not context.allow_elevated:
        raise PermissionDeniedError(action)
