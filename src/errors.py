"""
Domain Errors

Typed errors raised by the social services. The HTTP layer maps each one to
its status code (see src/app.py); services never build HTTP responses.
"""
from typing import Optional


class SocialError(Exception):
    """Base class for all errors raised by the social services."""
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def __str__(self):
        return self.message


class BadRequestError(SocialError):
    """Raised when a request carries an invalid value."""
    status_code = 400
    code = "bad_request"


class InvalidStateError(SocialError):
    """Raised when an entity is not in a state that allows the operation."""
    status_code = 400
    code = "invalid_state"


class UnauthorizedError(SocialError):
    """Raised when the caller identity is missing or invalid."""
    status_code = 401
    code = "unauthorized"


class ForbiddenError(SocialError):
    """Raised when the caller is authenticated but not allowed to act."""
    status_code = 403
    code = "forbidden"


class NotFoundError(SocialError):
    """Raised when a referenced entity does not exist."""
    status_code = 404
    code = "not_found"


class ConflictError(SocialError):
    """Raised on duplicates and unique-constraint violations."""
    status_code = 409
    code = "conflict"
