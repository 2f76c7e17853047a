"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Book Reviews API.

PostgreSQL (psycopg2) is the production database. SQLite is accepted for
local development; connection pool sizing does not apply to it.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → create a new session
2. Use session for all database operations in that request
3. Services commit their own units of work
4. Close session when request ends

This is implemented using FastAPI's dependency injection.
"""

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookreviews.config import get_settings

settings = get_settings()


def engine_options() -> dict[str, Any]:
    """
    Build create_engine() keyword arguments for the configured database.

    SQLite connections are shared across the threads FastAPI runs sync
    handlers on, so check_same_thread is disabled. Pool sizing only
    applies to server databases.
    """
    if settings.is_sqlite:
        return {
            "connect_args": {"check_same_thread": False},
            "echo": settings.debug,
        }
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,  # Verify connections are alive before using
        "echo": settings.debug,  # Log SQL in debug mode
    }


def enable_sqlite_foreign_keys(target_engine: Engine) -> None:
    """
    Turn on foreign key enforcement for every new SQLite connection.

    SQLite ignores ON DELETE CASCADE unless the pragma is set per
    connection; PostgreSQL always enforces it.
    """

    @event.listens_for(target_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# =============================================================================
# Database Engine
# =============================================================================
engine = create_engine(settings.database_url, **engine_options())
if settings.is_sqlite:
    enable_sqlite_foreign_keys(engine)


# =============================================================================
# Session Factory
# =============================================================================
# - autocommit=False: services decide when a unit of work is committed
# - autoflush=False: don't auto-flush before queries (more predictable behavior)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic reads Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield creates the session, code after yield closes it
    even if the route raised.

    Usage in Routes:
        from fastapi import Depends
        from bookreviews.database import get_db

        @router.get("/books/")
        def get_books(db: Session = Depends(get_db)):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    WARNING: In production, use Alembic migrations instead!
    """
    Base.metadata.create_all(bind=engine)

