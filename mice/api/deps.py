"""Shared API dependencies."""
from fastapi import Request
from sqlalchemy.orm import sessionmaker

from mice.core.cache import TTLCache
from mice.core.security import require_admin, require_attendee, verify_access_token
from mice.db import get_db, SessionLocal


def get_token_cache(request: Request) -> TTLCache:
    """The application's dynamic token cache (owned by app.state)."""
    return request.app.state.token_cache


def get_session_factory() -> sessionmaker:
    """Session factory for work that outlives the request, such as SSE feeds."""
    return SessionLocal


__all__ = [
    "get_db",
    "get_session_factory",
    "get_token_cache",
    "require_admin",
    "require_attendee",
    "verify_access_token",
]
