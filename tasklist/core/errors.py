"""
Error taxonomy for the task list service.

Services raise these; the API layer turns them into HTTP responses
(see tasklist.api.errors). Each error carries the status code and the
message that is safe to show a client.
"""

from __future__ import annotations


class AppError(Exception):
    """Base exception for all expected application errors."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    """Input failed one or more field rules."""

    status_code = 400
    message = "Invalid input"

    def __init__(self, errors: list[str], message: str | None = None):
        self.errors = list(errors)
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message}: {'; '.join(self.errors)}"


class ConflictError(AppError):
    """A unique value (the user's email) is already taken."""

    status_code = 400
    message = "User already exists"


class AuthError(AppError):
    """Login failed. Same message for unknown email and wrong password."""

    status_code = 401
    message = "Invalid credentials"


class AuthRequiredError(AppError):
    """A protected route was called without a bearer token."""

    status_code = 401
    message = "Authentication required"


class TokenError(AppError):
    """Base exception for token errors."""

    status_code = 401
    message = "Invalid or expired token"


class InvalidTokenError(TokenError):
    """Token is malformed, has a bad signature, or lacks required claims."""


class ExpiredTokenError(TokenError):
    """Token has expired."""


class NotFoundError(AppError):
    """
    The resource does not exist for this caller.

    Raised the same way whether the resource is missing or owned by
    someone else.
    """

    status_code = 404
    message = "Not found"


class ConfigError(AppError):
    """Required server configuration is missing or invalid."""

    status_code = 500
    public_message = "Server configuration error"
