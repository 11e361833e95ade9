"""User model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from mice.core.constants import UserRole
from mice.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.ATTENDEE.value, index=True)
    organization = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    # Relationships
    attendance_logs = relationship("AttendanceLog", back_populates="user", cascade="all, delete-orphan")
    event_entry = relationship("EventEntry", back_populates="user", uselist=False, cascade="all, delete-orphan")

    @property
    def is_attendee(self) -> bool:
        return self.role == UserRole.ATTENDEE.value
