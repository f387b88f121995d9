"""Typed errors raised by conversion store actions."""

from typing import Any


class ActionError(Exception):
    """Base error for a failed action, carrying a machine-readable code."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UnauthorizedError(ActionError):
    """Raised when no authenticated caller is available."""

    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "You must be signed in to perform this action."):
        super().__init__(message)


class NotFoundError(ActionError):
    """Raised when an id does not resolve to a record owned by the caller."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            f"{resource} not found.", {"resource": resource, "identifier": identifier}
        )
