"""Event entry (venue admission) business logic."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from mice.core.constants import UserRole
from mice.core.exceptions import InvalidCodeError, TransientError
from mice.core.logging_config import get_logger
from mice.db.models import EventEntry, User
from mice.services.utils import format_rate, get_user, parse_scanned_user_id

logger = get_logger(__name__)
audit_logger = get_logger("mice.audit")


@dataclass(frozen=True)
class EventEntryResult:
    entry: EventEntry
    user: User
    already_checked_in: bool


def _audit(outcome: str, operator_id: int, scanned: object, user_id: Optional[int] = None) -> None:
    audit_logger.info(
        "event_entry_scan",
        outcome=outcome,
        operator_id=operator_id,
        scanned_value=str(scanned),
        user_id=user_id,
    )


def _get_entry(db: Session, user_id: int) -> Optional[EventEntry]:
    return db.query(EventEntry).filter(EventEntry.user_id == user_id).first()


def record_event_entry(db: Session, scanned_user_id: object, operator_id: int) -> EventEntryResult:
    """Admit the holder of a personal QR code to the venue, once.

    Args:
        db: SQLAlchemy session
        scanned_user_id: Raw payload of the scanned personal QR (the user id)
        operator_id: ID of the admin operating the scanner, for the audit trail

    Returns:
        EventEntryResult with the entry row, the user and whether the user
        had already entered. A repeat scan returns the original entry
        unchanged.

    Raises:
        InvalidCodeError for malformed codes, unknown users and non-attendees
            alike; only the audit log tells them apart
        TransientError on storage failure
    """
    user_id = parse_scanned_user_id(scanned_user_id)
    if user_id is None:
        _audit("malformed", operator_id, scanned_user_id)
        raise InvalidCodeError(cause="malformed")

    try:
        user = get_user(db, user_id)
        if user is None:
            _audit("not_found", operator_id, scanned_user_id, user_id)
            raise InvalidCodeError(cause="not_found")

        if not user.is_attendee:
            _audit("wrong_role", operator_id, scanned_user_id, user_id)
            raise InvalidCodeError(cause="wrong_role")

        existing = _get_entry(db, user_id)
        if existing is not None:
            _audit("already_checked_in", operator_id, scanned_user_id, user_id)
            return EventEntryResult(entry=existing, user=user, already_checked_in=True)

        entry = EventEntry(user_id=user_id, entered_at=datetime.now(timezone.utc))
        try:
            db.add(entry)
            db.commit()
        except IntegrityError:
            # Another scanner admitted the same user between our read and insert
            db.rollback()
            winner = _get_entry(db, user_id)
            if winner is None:
                raise
            _audit("already_checked_in", operator_id, scanned_user_id, user_id)
            return EventEntryResult(entry=winner, user=user, already_checked_in=True)

        db.refresh(entry)
        _audit("checked_in", operator_id, scanned_user_id, user_id)
        return EventEntryResult(entry=entry, user=user, already_checked_in=False)

    except SQLAlchemyError as e:
        db.rollback()
        logger.error("event_entry_storage_error", user_id=user_id, error=str(e))
        raise TransientError(cause=str(e))


def get_event_entry_stats(db: Session) -> Dict[str, Any]:
    """Venue admission totals and the entries themselves, newest first."""
    try:
        total_entries = db.query(EventEntry).count()
        total_attendees = db.query(User).filter(User.role == UserRole.ATTENDEE.value).count()
        entries = (
            db.query(EventEntry)
            .options(joinedload(EventEntry.user))
            .order_by(EventEntry.entered_at.desc(), EventEntry.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("event_entry_stats_error", error=str(e))
        raise TransientError(cause=str(e))

    return {
        "total_entries": total_entries,
        "total_attendees": total_attendees,
        "check_in_rate": format_rate(total_entries, total_attendees),
        "entries": entries,
    }
