"""Exception types raised by gl-mcp."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gl_mcp.models import DeletionOutcome


class GitLabMCPError(Exception):
    """Base class for gl-mcp errors."""


class InvalidArgumentError(GitLabMCPError, ValueError):
    """Rejected input, raised before any remote call is made."""


class GitLabOperationError(GitLabMCPError):
    """A remote call failed; the message is prefixed with the operation name."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation}: {cause}")
        self.operation = operation
        self.cause = cause

    @property
    def status_code(self) -> int | None:
        response = getattr(self.cause, "response", None)
        return getattr(response, "status_code", None)


class OperationCancelled(GitLabMCPError):
    """The caller's cancellation event was set mid-operation."""

    def __init__(self, operation: str, partial: DeletionOutcome | None = None):
        super().__init__(f"{operation}: cancelled")
        self.operation = operation
        self.partial = partial


def require_identifier(value: str | int | None, name: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise InvalidArgumentError(f"{name} cannot be empty")
    return text
