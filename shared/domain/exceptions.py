"""
Domain Errors

Every error the hotel domains raise towards the request layer derives
from DomainError. The API exception handler turns them into
``{"success": false, "message": ...}`` responses using ``status_code``.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None, errors: list[str] | None = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)


class ValidationError(DomainError):
    """Missing or malformed input."""

    default_message = "Invalid reservation data"


class NotFoundError(DomainError):
    """Unknown room, guest or reservation id."""

    status_code = 404
    default_message = "Not found"


class ConflictError(DomainError):
    """Room unavailable, overlapping booking or duplicate guest email."""

    default_message = "Room is not available for the selected dates"


class StoreError(DomainError):
    """Persistence layer failure."""

    status_code = 500
    default_message = "Database operation failed"
