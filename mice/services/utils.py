"""Shared utilities for service layer."""
from typing import Optional
from sqlalchemy.orm import Session

from mice.core.constants import MAX_STORED_ID
from mice.core.exceptions import NotFoundError
from mice.db.models import ConferenceSession, User


def is_storable_id(value: int) -> bool:
    """True if value can be a primary key; larger ints overflow the driver."""
    return 0 < value <= MAX_STORED_ID


def get_session_or_404(db: Session, session_id: int) -> ConferenceSession:
    """Load a conference session by primary key or raise NotFoundError."""
    session = db.get(ConferenceSession, session_id) if is_storable_id(session_id) else None
    if session is None:
        raise NotFoundError("Session not found")
    return session


def get_user(db: Session, user_id: int) -> Optional[User]:
    """Load a user by primary key."""
    if not is_storable_id(user_id):
        return None
    return db.get(User, user_id)


def parse_scanned_user_id(value: object) -> Optional[int]:
    """
    Interpret the payload of a personal QR code as a user id.

    The code encodes the decimal id as plain text; scanners may hand it over
    as a string or a number. Returns None for anything that is not a
    positive integer within the primary key range.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if is_storable_id(value) else None
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            user_id = int(text)
            return user_id if is_storable_id(user_id) else None
    return None


def format_rate(numerator: int, denominator: int) -> str:
    """Percentage with two decimals, "0.00" when the denominator is zero."""
    if denominator <= 0:
        return "0.00"
    return f"{numerator / denominator * 100:.2f}"
