"""
pytest Fixtures for Books API Tests

Shared fixtures used across all test files.

For database tests, we use:
- session scope for the Database (expensive to create)
- function scope for sessions (isolation between tests)
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app.
# This disables rate limiting, sets a test secret key and keeps the
# app's own Database off PostgreSQL.
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Database, get_db
from app.main import app
from app.models import Author, Book
from app.services.security import create_access_token


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory: fast, isolated, no external database needed.
# StaticPool keeps the single connection alive for the whole session;
# without it the in-memory database would vanish between connections.

@pytest.fixture(scope="session")
def database() -> Generator[Database, None, None]:
    """Create an in-memory SQLite Database with all tables."""
    database = Database("sqlite://", poolclass=StaticPool)
    database.create_tables()

    yield database

    database.drop_tables()
    database.close()


@pytest.fixture(scope="function")
def db_session(database: Database) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session is wrapped in a transaction that's rolled back,
    so tests don't affect each other.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=database.engine,
    )

    connection = database.engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# AUTH FIXTURES
# =============================================================================
@pytest.fixture
def access_token() -> str:
    """A valid access token signed with the test secret."""
    return create_access_token({"sub": "test-user"})


@pytest.fixture
def auth_headers(access_token: str) -> dict[str, str]:
    """Authorization header carrying a valid bearer token."""
    return {"Authorization": f"Bearer {access_token}"}


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_author(db_session: Session) -> Author:
    """Create a sample author for testing."""
    author = Author(name="Frank Herbert")
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def second_author(db_session: Session) -> Author:
    """Create a second author for reassignment tests."""
    author = Author(name="Ursula K. Le Guin")
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_book(db_session: Session, sample_author: Author) -> Book:
    """Create a sample book owned by sample_author."""
    book = Book(
        title="Dune",
        description="Desert planet saga",
        author_id=sample_author.id,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def count_books(db_session: Session):
    """Return a callable giving the current number of books."""

    def _count() -> int:
        return db_session.execute(select(func.count(Book.id))).scalar_one()

    return _count
