"""Application error types.

Each error carries the HTTP status it maps to. Routes and services raise
these; the handlers registered in ``main`` turn them into JSON responses.
"""

from typing import Optional


class AppError(Exception):
    """Base class for errors that are reported to the client."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[dict[str, str]] = None):
        self.message = message or self.default_message
        self.errors = errors or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body: dict = {"error": self.message}
        if self.errors:
            body["errors"] = dict(self.errors)
        return body


class ValidationError(AppError):
    """Malformed or missing input. ``errors`` maps field names to messages."""
    status_code = 400
    default_message = "Validation failed"


class ConflictError(AppError):
    # Reported as 400, not 409
    status_code = 400
    default_message = "Email already registered"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Not authorized"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class InternalError(AppError):
    status_code = 500
