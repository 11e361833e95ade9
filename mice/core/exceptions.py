"""Check-in error taxonomy.

Each error carries the HTTP status it maps to and a short client-facing
message. ``cause`` is an internal detail: it is logged, never returned.
"""
from typing import Optional


class CheckinError(Exception):
    """Base class for every failure raised by the check-in services."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, cause: Optional[str] = None):
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)


class NotFoundError(CheckinError):
    """A referenced session or user does not exist."""

    status_code = 404
    default_message = "Not found"


class InvalidOrExpiredError(CheckinError):
    """A dynamic token was never issued or its window has closed."""

    status_code = 400
    default_message = "Invalid or expired QR code"


class InvalidCodeError(CheckinError):
    """A scanned personal code does not belong to an attendee."""

    status_code = 400
    default_message = "Invalid QR code"


class ForbiddenError(CheckinError):
    status_code = 403
    default_message = "Forbidden"


class ConflictError(CheckinError):
    """The record already exists under a uniqueness constraint."""

    status_code = 409
    default_message = "Already checked in to this session"


class TransientError(CheckinError):
    """Storage or cache temporarily unavailable."""

    status_code = 500
    default_message = "Service temporarily unavailable"
