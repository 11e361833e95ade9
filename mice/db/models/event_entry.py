"""EventEntry model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from mice.db.base import Base


class EventEntry(Base):
    __tablename__ = "event_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # At most one physical entry per user for the whole event
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    entered_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc), index=True)

    # Relationships
    user = relationship("User", back_populates="event_entry")
