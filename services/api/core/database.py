"""
Database Connection and Session Management Module

This module provides database connectivity using SQLAlchemy ORM with
connection pooling, session management, and dependency injection patterns.

Industry Standards:
    - Connection pooling for performance
    - Context manager pattern for session lifecycle
    - Dependency injection for FastAPI
    - Declarative base for ORM models
    - Pool pre-ping for connection health checks

Architecture:
    - create_db_engine: Builds the connection pool manager from settings
    - create_session_factory: Session factory bound to an engine
    - Base: Declarative base class for all ORM models
    - get_db: Dependency injection function for FastAPI routes

The engine and session factory are owned by the application instance
(``app.state.session_factory``), never by this module, so tests can hand
the app a SQLite engine without touching the production configuration.
"""

from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import Settings, settings as default_settings

# Declarative Base
# ================
# Base class for all ORM models
# All database models should inherit from this class
Base = declarative_base()


def create_db_engine(config: Optional[Settings] = None) -> Engine:
    """
    Create the SQLAlchemy Engine (Connection Pool Manager)

    Args:
        config: Settings to read the database configuration from.
                Defaults to the process-wide settings.

    Returns:
        Engine: Configured SQLAlchemy engine

    Note:
        Pool sizing and the UTC timezone option only apply to PostgreSQL.
        Other backends (SQLite for local runs and tests) use their
        dialect defaults.
    """
    config = config or default_settings
    url = make_url(config.DATABASE_URL)

    options = {
        # Verify connection health before using (prevents stale connections)
        "pool_pre_ping": True,
        # Log all SQL statements when enabled
        "echo": config.DATABASE_ECHO,
    }

    if url.get_backend_name() == "postgresql":
        options.update(
            # Number of persistent connections to keep open in the pool
            pool_size=config.DATABASE_POOL_SIZE,
            # Total max connections = pool_size + max_overflow
            max_overflow=config.DATABASE_MAX_OVERFLOW,
            # Recycle connections after 1 hour to prevent timeout issues
            pool_recycle=3600,
            # Sets timezone to UTC for consistency across environments
            connect_args={"options": "-c timezone=utc"},
        )

    return create_engine(url, **options)


def create_session_factory(engine: Engine) -> sessionmaker:
    """
    Create a Session Factory Bound to ``engine``

    Sessions represent a "workspace" for database operations. KPI reads
    never write, but the factory keeps explicit transaction control so
    the same sessions can be reused by write paths.
    """
    return sessionmaker(
        # Explicit transaction control (recommended)
        autocommit=False,
        # Changes aren't automatically sent to DB until explicitly flushed
        autoflush=False,
        bind=engine,
        # Allows accessing object attributes after transaction is committed
        expire_on_commit=False,
    )


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database Session Dependency (Dependency Injection Pattern)

    Provides a database session for FastAPI route handlers.
    Automatically handles session lifecycle: creation, usage, and cleanup.

    Yields:
        Session: SQLAlchemy database session

    Example:
        ```python
        @router.get("/ponds")
        def list_ponds(db: Session = Depends(get_db)):
            return db.query(Pond).all()
        ```

    Note:
        - Session is automatically closed after request completion
        - Exceptions trigger automatic rollback
        - Each request gets its own isolated session
    """
    db = request.app.state.session_factory()

    try:
        yield db

    except Exception:
        # Undo any uncommitted changes, then let FastAPI handle the error
        db.rollback()
        raise

    finally:
        # Always return the connection to the pool
        db.close()


def init_db(engine: Engine) -> None:
    """
    Initialize Database Schema

    Creates all tables defined in SQLAlchemy models.

    Note:
        - Only creates tables that don't exist
        - Does not handle migrations (use Alembic for that)
        - Safe to call multiple times (idempotent)

    Warning:
        In production, use migrations instead of this function.
        This is primarily for development and testing.
    """
    # Import models so every table is registered on Base.metadata
    from .. import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
