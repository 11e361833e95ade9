"""Admin endpoints: session attendance and venue entry."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from mice.api.deps import get_db, require_admin
from mice.core.config import settings
from mice.core.rate_limit import limiter, RATE_LIMITS
from mice.core.timing import enforce_min_duration
from mice.schemas import (
    AttendanceLogWithUser,
    ErrorResponse,
    EventEntryOut,
    EventEntryRequest,
    EventEntryResponse,
    EventEntryStats,
    SessionAttendanceResponse,
    TokenPayload,
    UserSummary,
)
from mice.services.attendance import get_session_attendance
from mice.services.event_entry import get_event_entry_stats, record_event_entry

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/sessions/{session_id}/attendance", response_model=SessionAttendanceResponse)
async def get_session_attendance_endpoint(session_id: int, db: Session = Depends(get_db)):
    """Attendance records for one session, newest first (admin only)."""
    logs = get_session_attendance(db, session_id)
    return SessionAttendanceResponse(
        session_id=session_id,
        total_attendees=len(logs),
        attendance_logs=[AttendanceLogWithUser.model_validate(log) for log in logs],
    )


@router.post(
    "/event-entry",
    response_model=EventEntryResponse,
    status_code=201,
    responses={200: {"model": EventEntryResponse}, 400: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMITS["event_entry"])
async def event_entry_endpoint(
    request: Request,
    response: Response,
    entry_request: EventEntryRequest,
    db: Session = Depends(get_db),
    admin: TokenPayload = Depends(require_admin),
):
    """
    Admit an attendee to the venue by scanning their personal QR (admin only).

    The first scan records the entry (201). Later scans of the same code are
    not errors: they return the original entry time with alreadyCheckedIn
    set (200).

    Example:
        Request:
            POST /api/admin/event-entry
            Authorization: Bearer eyJhbGc...
            {
                "userId": 9
            }

        Response (201):
            {
                "message": "Check-in successful",
                "alreadyCheckedIn": false,
                "entryTime": "2026-10-19T08:55:41.512300Z",
                "user": {"id": 9, "name": "...", "email": "...", "organization": null}
            }

        Response (400):
            {
                "detail": "Invalid QR code"
            }

    Security:
        - Unknown ids and non-attendee ids get the same 400 response
        - Every outcome takes at least EVENT_ENTRY_MIN_DURATION_MS to answer
        - Each scan is written to the audit log with the operator's id
    """
    async with enforce_min_duration(settings.EVENT_ENTRY_MIN_DURATION_MS / 1000):
        if entry_request.user_id is None or entry_request.user_id == "":
            raise HTTPException(status_code=400, detail="User ID is required")
        result = record_event_entry(db, entry_request.user_id, admin.user_id)

    if result.already_checked_in:
        response.status_code = 200

    return EventEntryResponse(
        message="Already checked in" if result.already_checked_in else "Check-in successful",
        already_checked_in=result.already_checked_in,
        entry_time=result.entry.entered_at,
        user=UserSummary.model_validate(result.user),
    )


@router.get("/event-entry/stats", response_model=EventEntryStats)
async def event_entry_stats_endpoint(db: Session = Depends(get_db)):
    """Venue admission totals and check-in rate (admin only)."""
    stats = get_event_entry_stats(db)
    return EventEntryStats(
        total_entries=stats["total_entries"],
        total_attendees=stats["total_attendees"],
        check_in_rate=stats["check_in_rate"],
        entries=[EventEntryOut.model_validate(entry) for entry in stats["entries"]],
    )
