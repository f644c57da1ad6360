"""Error taxonomy for the authentication service.

Every failure that leaves a ``teachme.security`` function is one of these.
Infrastructure errors (database, signing) are converted or left to the
generic 500 handler in ``teachme.main``; they are never rendered verbatim.
"""
from typing import Any, Optional


class AuthServiceError(Exception):
    """Base class: carries the HTTP status and the public error envelope"""

    status_code: int = 500
    code: str = "internal_server_error"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        payload = {"error": self.code, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AuthServiceError):
    status_code = 400
    code = "validation_error"
    default_message = "Invalid input"


class UnauthorizedError(AuthServiceError):
    """Authentication failure.

    ``reason`` is the internal diagnostic (expired, mismatch, ...) and is
    only ever logged; ``message`` is what the client sees.
    """

    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required"

    def __init__(self, reason: str, message: Optional[str] = None):
        self.reason = reason
        super().__init__(message)


class ForbiddenError(AuthServiceError):
    status_code = 403
    code = "forbidden"
    default_message = "Insufficient permissions"


class NotFoundError(AuthServiceError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ConflictError(AuthServiceError):
    status_code = 409
    code = "conflict"
    default_message = "Resource already exists"


# Public messages shared by every failure of one kind, so responses
# cannot be used to tell the failure causes apart.
INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"
INVALID_ACCESS_TOKEN = "Invalid or expired token"
