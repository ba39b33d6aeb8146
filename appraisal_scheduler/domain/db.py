"""Database engine and session helpers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

DEFAULT_DB_URL = "sqlite:///appraisal.db"


def create_db_engine(db_url: str = DEFAULT_DB_URL, echo: bool = False):
    """Create an engine; SQLite connections get foreign key enforcement."""
    engine = create_engine(db_url, echo=echo)
    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    return engine


def init_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(create_db_engine(db_url))
    print(f"[INFO] Database initialized: {db_url}")


def reset_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Drop all tables and recreate (WARNING: deletes all data!)."""
    engine = create_db_engine(db_url)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    print(f"[WARN] Database reset: {db_url}")


def get_session(db_url: str = DEFAULT_DB_URL) -> Session:
    return sessionmaker(bind=create_db_engine(db_url))()


@contextmanager
def session_scope(db_url: str = DEFAULT_DB_URL) -> Iterator[Session]:
    """Yield a session; roll back on error and always close."""
    session = get_session(db_url)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
