"""Session check-in schemas."""
from datetime import datetime
from typing import List, Optional

from mice.schemas.common import CamelModel
from mice.schemas.user import UserSummary


class CheckinRequest(CamelModel):
    dynamic_token: Optional[str] = None


class AttendanceLogOut(CamelModel):
    id: int
    user_id: int
    session_id: int
    checked_in_at: datetime


class CheckinResponse(CamelModel):
    message: str
    attendance_log: AttendanceLogOut


class AttendanceLogWithUser(AttendanceLogOut):
    user: UserSummary


class SessionAttendanceResponse(CamelModel):
    session_id: int
    total_attendees: int
    attendance_logs: List[AttendanceLogWithUser]
