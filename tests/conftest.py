# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-crush-confessions")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("PRESENCE_BACKEND", "memory")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from crush_confessions.core.security import create_access_token
from crush_confessions.db.session import Base, build_engine, create_tables, drop_tables
from crush_confessions.db.session import get_db as app_get_session
from crush_confessions.main import app as fastapi_app
from crush_confessions.models import User
from crush_confessions.services.presence import InMemoryPresenceTracker
from tests.factories import FakeClock, make_user

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """Plain session; services commit and roll back on it like in production."""
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def presence(app: FastAPI, fake_clock: FakeClock) -> Iterator[InMemoryPresenceTracker]:
    """Give every test a fresh presence tracker driven by a fake clock."""
    previous = getattr(app.state, "presence", None)
    tracker = InMemoryPresenceTracker(ttl_seconds=3.0, clock=fake_clock)
    app.state.presence = tracker
    try:
        yield tracker
    finally:
        app.state.presence = previous


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def user_factory(db_session: Session) -> Callable[..., User]:
    """Return a callable creating persisted users."""

    def _factory(email: str, display_name: str | None = None, **kwargs) -> User:
        return make_user(db_session, email, display_name, **kwargs)

    return _factory


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return the primary test user."""
    return make_user(db_session, "alice@umt.edu.pk", "Alice")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted user."""
    return make_user(db_session, "bob@umt.edu.pk", "Bob")


@pytest.fixture()
def third_user(db_session: Session) -> User:
    """Create and return a third user with no display name."""
    return make_user(db_session, "carol@umt.edu.pk", None)


def _headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return _headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return _headers(other_user)


@pytest.fixture()
def third_auth_token(third_user: User) -> dict[str, str]:
    """Return authorization headers for the third test user."""
    return _headers(third_user)
