"""
Error taxonomy shared by components and the HTTP layer.

Components raise these; the API renders them as {"error": message} with the
class's status code.
"""

from __future__ import annotations


class GentlyToldError(Exception):
    """Base class for errors that carry an HTTP status."""

    status_code: int = 500
    code: str = "INTERNAL"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class ValidationError(GentlyToldError):
    """Malformed or missing required input."""

    status_code = 400
    code = "VALIDATION"


class AuthorizationError(GentlyToldError):
    """Missing or invalid admin token / master key."""

    status_code = 401
    code = "UNAUTHORIZED"


class NotFoundError(GentlyToldError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(GentlyToldError):
    """Duplicate state transition or lost version race."""

    status_code = 409
    code = "CONFLICT"


class UpstreamError(GentlyToldError):
    """A collaborator (store, messaging API) failed."""

    status_code = 502
    code = "UPSTREAM"
