"""Test data helpers."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from mice.core.constants import UserRole
from mice.core.security import create_access_token
from mice.db.models import ConferenceSession, User


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_user(
    session: Session,
    role: UserRole = UserRole.ATTENDEE,
    name: str = "Test User",
    email: Optional[str] = None,
    organization: Optional[str] = None,
) -> User:
    """Insert a user and return it."""
    user = User(
        email=email or f"{name.lower().replace(' ', '.')}.{role.value.lower()}@mice.test",
        name=name,
        role=role.value,
        organization=organization,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_session(session: Session, title: str = "Keynote", speaker: Optional[User] = None) -> ConferenceSession:
    """Insert a conference session that is running now and return it."""
    now = datetime.now(timezone.utc)
    conference_session = ConferenceSession(
        title=title,
        description=f"{title} description",
        start_time=now - timedelta(minutes=10),
        end_time=now + timedelta(hours=1),
        speaker_id=speaker.id if speaker else None,
        track="Main",
    )
    session.add(conference_session)
    session.commit()
    session.refresh(conference_session)
    return conference_session


def auth_headers(user: User) -> dict:
    """Authorization header carrying a bearer token for a stored user."""
    token = create_access_token(user.id, UserRole(user.role), user.email)
    return {"Authorization": f"Bearer {token}"}
