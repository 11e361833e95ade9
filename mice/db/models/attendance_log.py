"""AttendanceLog model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from mice.db.base import Base


class AttendanceLog(Base):
    __tablename__ = "attendance_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    checked_in_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    # Relationships
    user = relationship("User", back_populates="attendance_logs")
    session = relationship("ConferenceSession", back_populates="attendance_logs")

    __table_args__ = (
        Index("idx_attendance_logs_session", "session_id"),
        # One attendance record per attendee per session; enforced on insert
        UniqueConstraint("user_id", "session_id", name="uq_attendance_user_session"),
    )
