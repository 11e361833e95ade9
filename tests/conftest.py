"""Shared test fixtures and configuration."""
import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from mice.main import app  # noqa: E402
from mice.db.base import Base  # noqa: E402
from mice.db.session import enable_sqlite_foreign_keys  # noqa: E402
from mice.api.deps import get_db, get_session_factory, get_token_cache  # noqa: E402
from mice.core.cache import TTLCache  # noqa: E402
from mice.core.constants import UserRole  # noqa: E402
from tests.utils import FakeClock, auth_headers, make_session, make_user  # noqa: E402


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    from mice.core.rate_limit import limiter

    limiter.reset()
    if "rate_limit" in request.keywords:
        limiter.enabled = True
        yield
        limiter.reset()
    else:
        previous = limiter.enabled
        limiter.enabled = False
        yield
        limiter.enabled = previous


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_cache(clock):
    """A private token cache driven by the fake clock."""
    return TTLCache(max_size=1000, clock=clock)


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a new database session for a test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session, session_factory, token_cache):
    """Create a test client with a test database and a test token cache."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_token_cache] = lambda: token_cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, UserRole.ADMIN, name="Admin One", organization="MICE Ops")


@pytest.fixture
def attendee(db_session):
    return make_user(db_session, UserRole.ATTENDEE, name="Attendee One", organization="KAIST")


@pytest.fixture
def speaker(db_session):
    return make_user(db_session, UserRole.SPEAKER, name="Speaker One", organization="SNU")


@pytest.fixture
def conference_session(db_session, speaker):
    return make_session(db_session, speaker=speaker)


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def attendee_headers(attendee):
    return auth_headers(attendee)
