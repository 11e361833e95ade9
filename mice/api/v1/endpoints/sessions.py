"""Session endpoints: dynamic QR issuance and attendance check-in."""
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from mice.api.deps import get_db, get_token_cache, require_admin, require_attendee
from mice.core.cache import TTLCache
from mice.core.rate_limit import limiter, RATE_LIMITS
from mice.schemas import (
    AttendanceLogOut,
    CheckinRequest,
    CheckinResponse,
    DynamicQRResponse,
    ErrorResponse,
    TokenPayload,
)
from mice.services.attendance import redeem_dynamic_token
from mice.services.dynamic_qr import issue_dynamic_token

router = APIRouter()


@router.get(
    "/{session_id}/dynamic-qr",
    response_model=DynamicQRResponse,
    dependencies=[Depends(require_admin)],
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMITS["dynamic_qr"])
async def get_dynamic_qr_endpoint(
    request: Request,
    session_id: int,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_token_cache),
):
    """
    Issue a fresh dynamic QR token for a session (admin only).

    The token admits attendees to the session for 60 seconds. Displays call
    this again before the window closes; earlier tokens keep working until
    their own expiry.

    Example:
        Request:
            GET /api/sessions/42/dynamic-qr
            Authorization: Bearer eyJhbGc...

        Response (200):
            {
                "sessionId": 42,
                "dynamicToken": "pX3v0m2Qb8K9dW1cYt7NfA",
                "expiresIn": 60,
                "generatedAt": "2026-10-19T09:30:00.123456Z"
            }

        Response (404):
            {
                "detail": "Session not found"
            }
    """
    issued = issue_dynamic_token(db, cache, session_id)
    return DynamicQRResponse(
        session_id=issued.session_id,
        dynamic_token=issued.token,
        expires_in=issued.ttl_seconds,
        generated_at=issued.issued_at,
    )


@router.post(
    "/check-in",
    response_model=CheckinResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMITS["check_in"])
async def checkin_endpoint(
    request: Request,
    checkin_request: CheckinRequest,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_token_cache),
    current_user: TokenPayload = Depends(require_attendee),
):
    """
    Check in to a session by redeeming the token from its QR display (attendee only).

    Example:
        Request:
            POST /api/sessions/check-in
            Authorization: Bearer eyJhbGc...
            {
                "dynamicToken": "pX3v0m2Qb8K9dW1cYt7NfA"
            }

        Response (201):
            {
                "message": "Check-in successful",
                "attendanceLog": {
                    "id": 7,
                    "userId": 7,
                    "sessionId": 42,
                    "checkedInAt": "2026-10-19T09:30:12.004211Z"
                }
            }

        Response (400):
            {
                "detail": "Invalid or expired QR code"
            }

        Response (409):
            {
                "detail": "Already checked in to this session"
            }

    Security:
        - Unknown and expired tokens answer identically
        - One record per (attendee, session), enforced by a unique index
    """
    if not checkin_request.dynamic_token:
        raise HTTPException(status_code=400, detail="Dynamic token is required")

    record = redeem_dynamic_token(db, cache, checkin_request.dynamic_token, current_user.user_id)
    return CheckinResponse(
        message="Check-in successful",
        attendance_log=AttendanceLogOut.model_validate(record),
    )
