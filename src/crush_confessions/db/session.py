"""Engine, session factory and declarative base for CrushConfessions."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from crush_confessions.core.settings import settings


class Base(DeclarativeBase):
    """Metadata root for users, confessions, comments and conversations."""


def build_engine(url: str, **kwargs: Any) -> Engine:
    """Create an engine for ``url``; SQLite connections may cross request threads."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, echo=settings.sql_debug, **kwargs)


# Register every table on Base.metadata before create_all or Alembic reads it.
import crush_confessions.models  # noqa: E402,F401

engine = build_engine(settings.effective_database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; services commit or roll back explicitly."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine | None = None) -> None:
    Base.metadata.create_all(bind=bind or engine)


def drop_tables(bind: Engine | None = None) -> None:
    Base.metadata.drop_all(bind=bind or engine)
