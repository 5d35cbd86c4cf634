"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Books API.

We're using SYNCHRONOUS SQLAlchemy: FastAPI runs the sync route handlers
in its threadpool, so a request waiting on the database never blocks the
event loop.

Ownership
=========
There is no module-level engine. A Database object owns the engine and
the session factory; create_app() builds one (or receives one from the
caller) and stores it on app.state. The lifespan handler in app.main opens
it at startup and disposes it at shutdown.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives -> get_db() opens a session from app.state.database
2. The route uses that session for all database operations
3. The session is closed when the request ends
"""

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.config import Settings

logger = logging.getLogger(__name__)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

        class Book(Base):
            __tablename__ = "books"
            ...
    """
    pass


# =============================================================================
# Database Handle
# =============================================================================
class Database:
    """
    Engine plus session factory for one database.

    Key engine parameters:
    - pool_size / max_overflow: connection pool sizing (server databases only)
    - pool_pre_ping: test connection health before using
    - echo: log all SQL statements (debug mode)

    Extra keyword arguments go straight to create_engine(), which is how
    tests pass poolclass=StaticPool for an in-memory SQLite database.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
        **engine_kwargs: Any,
    ) -> None:
        self.url = url

        if url.startswith("sqlite"):
            # SQLite connections are used from FastAPI's threadpool
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        else:
            engine_kwargs.setdefault("pool_size", pool_size)
            engine_kwargs.setdefault("max_overflow", max_overflow)
            engine_kwargs.setdefault("pool_pre_ping", True)

        self.engine: Engine = create_engine(url, echo=echo, **engine_kwargs)

        # autocommit/autoflush off: handlers commit explicitly
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a Database from application settings."""
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            echo=settings.debug,
        )

    def session(self) -> Session:
        """Open a new session bound to this database."""
        return self.session_factory()

    def create_tables(self) -> None:
        """
        Create all tables known to Base.metadata.

        Useful for development and tests. Existing tables are left alone.
        """
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        """Drop all tables. Deletes all data."""
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            return False
        return True

    def close(self) -> None:
        """Dispose the connection pool."""
        self.engine.dispose()

    def __repr__(self) -> str:
        return f"Database(url='{self.engine.url.render_as_string(hide_password=True)}')"


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Opens a session from the Database attached to the running app,
    yields it to the route handler and closes it when the request ends.

    Yields:
        SQLAlchemy Session instance
    """
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
