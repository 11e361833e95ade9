"""Pydantic schemas for request/response validation."""
from mice.schemas.auth import TokenPayload
from mice.schemas.checkin import (
    CheckinRequest,
    CheckinResponse,
    AttendanceLogOut,
    AttendanceLogWithUser,
    SessionAttendanceResponse,
)
from mice.schemas.event_entry import (
    EventEntryRequest,
    EventEntryResponse,
    EventEntryOut,
    EventEntryStats,
)
from mice.schemas.qr import DynamicQRResponse, DynamicQRStreamEvent, EntryPassResponse
from mice.schemas.user import UserSummary, UserWithRole
from mice.schemas.common import CamelModel, ErrorResponse

__all__ = [
    "TokenPayload",
    "CheckinRequest",
    "CheckinResponse",
    "AttendanceLogOut",
    "AttendanceLogWithUser",
    "SessionAttendanceResponse",
    "EventEntryRequest",
    "EventEntryResponse",
    "EventEntryOut",
    "EventEntryStats",
    "DynamicQRResponse",
    "DynamicQRStreamEvent",
    "EntryPassResponse",
    "UserSummary",
    "UserWithRole",
    "CamelModel",
    "ErrorResponse",
]
