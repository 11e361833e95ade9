"""Conference session model."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from mice.db.base import Base


class ConferenceSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    speaker_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    track = Column(String(100), nullable=True)

    # Relationships
    speaker = relationship("User")
    attendance_logs = relationship("AttendanceLog", back_populates="session", cascade="all, delete-orphan")
