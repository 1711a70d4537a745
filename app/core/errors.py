"""
Error taxonomy for RoadFix.

Every error raised by the services layer is a DomainError carrying the
HTTP status class it maps to. Route handlers do not translate errors
themselves; the exception handlers in app.main render them as
{"error": message}.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    status_code = 400
    default_message = "Missing fields"


class AuthenticationError(DomainError):
    status_code = 401
    default_message = "Authentication failed"


class InvalidCredentials(AuthenticationError):
    default_message = "Invalid username or password"


class MissingCredential(AuthenticationError):
    default_message = "Authorization header missing"


class MalformedCredential(AuthenticationError):
    default_message = "Invalid authorization format"


class InvalidOrExpiredCredential(AuthenticationError):
    default_message = "Invalid or expired token"


class AuthorizationError(DomainError):
    """
    Role lacks permission for the operation.

    The message is always the same so a denied caller cannot tell
    whether the target resource exists.
    """

    status_code = 403
    default_message = "Forbidden"

    def __init__(self):
        super().__init__(self.default_message)


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Not found"


class ConflictError(DomainError):
    status_code = 409
    default_message = "Conflict"


class InvalidTransitionError(ConflictError):
    default_message = "Invalid status transition"


class TeamUnavailableError(ConflictError):
    default_message = "Team is already working on another report"


class StoreError(DomainError):
    """Persistence failure. The message never includes store details."""

    status_code = 500
    default_message = "Storage failure"
