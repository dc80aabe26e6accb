"""Exception taxonomy shared by the service components.

Each error carries the HTTP status it maps to; the global error handler
turns any ``MatkaError`` into a ``{"detail": ...}`` JSON response.
"""

from __future__ import annotations


class MatkaError(Exception):
    """Base class for errors that surface to API callers."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(MatkaError):
    """Missing or malformed required fields."""

    status_code = 400
    default_detail = "Invalid request"


class AuthError(MatkaError):
    """Missing, invalid or expired bearer token."""

    status_code = 401
    default_detail = "Not authorized"


class InvalidCredentialsError(AuthError):
    """Username/password pair did not match an admin."""

    default_detail = "Invalid credentials"


class NotFoundError(MatkaError):
    status_code = 404
    default_detail = "Not found"


class StoreError(MatkaError):
    """Persistence failure. Details are logged, never returned."""

    status_code = 500
    default_detail = "Database operation failed"


class NoSubscribersError(MatkaError):
    status_code = 400
    default_detail = "No subscriptions available"
