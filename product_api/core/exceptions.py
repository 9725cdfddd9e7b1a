"""
Application error taxonomy. Services raise these; the API layer renders them
as the uniform error envelope (see core/error_handlers.py).
"""

from typing import Mapping, Sequence


class AppError(Exception):
    """Base for errors that map onto a client-facing status and message."""

    status_code = 500
    message = "Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class ValidationError(AppError):
    """Client input rejected before any persistence; reported per field."""

    status_code = 422
    message = "Validation failed"

    def __init__(self, errors: Mapping[str, Sequence[str]], message: str | None = None):
        super().__init__(message)
        self.errors = {field: list(messages) for field, messages in errors.items()}


class AuthenticationError(AppError):
    """Missing, invalid or rejected credentials. Never field-specific."""

    status_code = 401
    message = "Unauthenticated"

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class NotFoundError(AppError):
    status_code = 404
    message = "Resource not found"


class RateLimitError(AppError):
    status_code = 429
    message = "Too Many Attempts."

    def __init__(self, retry_after: int, limit: int, message: str | None = None):
        super().__init__(message)
        self.retry_after = retry_after
        self.limit = limit

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Retry-After": str(self.retry_after),
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": "0",
        }


class EmailAlreadyRegistered(Exception):
    """Raised by user repositories when the unique email constraint is hit."""
