"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here so metadata.create_all() sees them
from mice.db.models.user import User  # noqa: F401, E402
from mice.db.models.conference_session import ConferenceSession  # noqa: F401, E402
from mice.db.models.attendance_log import AttendanceLog  # noqa: F401, E402
from mice.db.models.event_entry import EventEntry  # noqa: F401, E402
