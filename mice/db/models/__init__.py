"""Database models."""
from mice.db.models.user import User
from mice.db.models.conference_session import ConferenceSession
from mice.db.models.attendance_log import AttendanceLog
from mice.db.models.event_entry import EventEntry

__all__ = ["User", "ConferenceSession", "AttendanceLog", "EventEntry"]
