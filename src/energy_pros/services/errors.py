"""Domain errors raised by the service layer.

Each error carries the HTTP status the API layer answers with, so request
handlers can let them propagate to the application's exception handler.
"""

from __future__ import annotations

from fastapi import status


class DomainError(RuntimeError):
    """Base exception for all domain-level failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(DomainError):
    """Raised when input is well-formed but violates a business rule."""


class AuthenticationRequired(DomainError):
    """Raised when an operation needs a signed-in user."""

    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDenied(DomainError):
    """Raised when acting on a resource owned by someone else."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFound(DomainError):
    """Raised when an identifier does not resolve to a row."""

    status_code = status.HTTP_404_NOT_FOUND


class Conflict(DomainError):
    """Raised for duplicates: taken usernames, repeated endorsements."""


class InviteInvalid(Conflict):
    """Raised when an invite code is unknown or already consumed."""

    def __init__(self, message: str = "Invalid or already used invite code") -> None:
        super().__init__(message)


class AggregationError(DomainError):
    """Raised when the store fails while computing counts or rankings."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Error computing aggregation") -> None:
        super().__init__(message)
