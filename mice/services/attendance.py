"""Session attendance business logic."""
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from mice.core.cache import TTLCache
from mice.core.constants import MAX_DYNAMIC_TOKEN_LENGTH
from mice.core.exceptions import (
    CheckinError,
    ConflictError,
    InvalidOrExpiredError,
    NotFoundError,
    TransientError,
)
from mice.core.logging_config import get_logger
from mice.db.models import AttendanceLog, ConferenceSession
from mice.services.utils import get_session_or_404, is_storable_id

logger = get_logger(__name__)


def redeem_dynamic_token(db: Session, cache: TTLCache, token: str, user_id: int) -> AttendanceLog:
    """Turn a scanned dynamic token into an attendance record for user_id.

    Args:
        db: SQLAlchemy session
        cache: Token cache the token was issued into
        token: Dynamic token read from the session's QR display
        user_id: ID of the attendee redeeming it (role already checked)

    Returns:
        AttendanceLog: The newly created record

    Raises:
        InvalidOrExpiredError if the token is unknown or its window closed
        ConflictError if the user already checked in to that session
        NotFoundError if the session vanished after the token was issued,
            or the user no longer exists
        TransientError on any other storage failure

    The token is not consumed: everyone in the room scans the same code
    while it is on screen. The unique index on (user_id, session_id) is what
    stops one attendee from being counted twice, including under concurrent
    submissions.
    """
    if len(token) > MAX_DYNAMIC_TOKEN_LENGTH:
        logger.info("dynamic_token_rejected", user_id=user_id, reason="oversized")
        raise InvalidOrExpiredError(cause="token oversized")

    session_id, status = cache.lookup(token)
    if session_id is None:
        logger.info("dynamic_token_rejected", user_id=user_id, reason=status)
        raise InvalidOrExpiredError(cause=f"token {status}")

    if not is_storable_id(user_id):
        raise NotFoundError("User not found", cause="user id out of range")

    record = AttendanceLog(
        user_id=user_id,
        session_id=session_id,
        checked_in_at=datetime.now(timezone.utc),
    )

    try:
        try:
            db.add(record)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise _integrity_error(db, user_id, session_id, e)
        db.refresh(record)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("attendance_storage_error", user_id=user_id, session_id=session_id, error=str(e))
        raise TransientError(cause=str(e))

    logger.info("attendance_recorded", user_id=user_id, session_id=session_id, attendance_id=record.id)
    return record


def _integrity_error(db: Session, user_id: int, session_id: int, error: IntegrityError) -> CheckinError:
    """Tell which constraint rejected the insert: the unique index or a foreign key."""
    if _attendance_exists(db, user_id, session_id):
        logger.info("attendance_conflict", user_id=user_id, session_id=session_id)
        return ConflictError(cause="uq_attendance_user_session")

    logger.warning(
        "attendance_integrity_error",
        user_id=user_id,
        session_id=session_id,
        error=str(error.orig),
    )
    session_exists = db.query(ConferenceSession.id).filter(
        ConferenceSession.id == session_id
    ).first() is not None
    if not session_exists:
        return NotFoundError("Session not found", cause=str(error.orig))
    return NotFoundError("User not found", cause=str(error.orig))


def _attendance_exists(db: Session, user_id: int, session_id: int) -> bool:
    return db.query(AttendanceLog.id).filter(
        AttendanceLog.user_id == user_id,
        AttendanceLog.session_id == session_id,
    ).first() is not None


def get_session_attendance(db: Session, session_id: int) -> List[AttendanceLog]:
    """Attendance records for a session, most recent first, with users loaded."""
    get_session_or_404(db, session_id)

    return (
        db.query(AttendanceLog)
        .options(joinedload(AttendanceLog.user))
        .filter(AttendanceLog.session_id == session_id)
        .order_by(AttendanceLog.checked_in_at.desc(), AttendanceLog.id.desc())
        .all()
    )
