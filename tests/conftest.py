"""
pytest Fixtures for Book Reviews API Tests

Shared fixtures used across all test files.

Database strategy:
- One in-memory SQLite engine for the whole session (StaticPool keeps the
  single connection, and so the database, alive)
- Each test runs inside an outer transaction that is rolled back
  afterwards. The session joins it with join_transaction_mode=
  "create_savepoint", so the commits done by the review store and the
  aggregation engine only release SAVEPOINTs and never reach the outer
  transaction.

pysqlite's own transaction handling breaks SAVEPOINT, so the engine turns
it off and emits BEGIN itself. Foreign keys are switched on per connection
so ON DELETE CASCADE behaves as it does on PostgreSQL.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-signing-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from bookreviews.database import Base, get_db
from bookreviews.main import app
from bookreviews.models import Book, Review, User
from bookreviews.services.consistency import create_review_store
from bookreviews.services.security import create_access_token, hash_password


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    Scope: session. Tables are created once and dropped at the end.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _configure_connection(dbapi_connection, connection_record):
        # Let SQLAlchemy control BEGIN so SAVEPOINTs nest correctly
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a database session whose work is rolled back after the test.

    Scope: function, so tests don't affect each other.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client that uses the test session.

    get_db is overridden, so every dependency built on it (the review
    store, the aggregation engine, the current user) shares db_session.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


def make_user(db: Session, username: str, is_superuser: bool = False) -> User:
    """Insert an active user with password SecurePass123."""
    user = User(
        email=f"{username}@example.com",
        username=username,
        hashed_password=hash_password("SecurePass123"),
        full_name=username.title(),
        is_active=True,
        is_superuser=is_superuser,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_book(db: Session, title: str = "1984", author: str = "George Orwell") -> Book:
    book = Book(title=title, author=author)
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


@pytest.fixture
def sample_book(db_session: Session) -> Book:
    """Create a sample book with no reviews."""
    book = Book(
        title="1984",
        author="George Orwell",
        description="A dystopian novel set in a totalitarian society.",
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def multiple_books(db_session: Session) -> list[Book]:
    """Create more books than fit on one default page."""
    return [
        make_book(db_session, title=f"Test Book {i + 1}", author=f"Author {i + 1}")
        for i in range(15)
    ]


@pytest.fixture
def sample_user(db_session: Session) -> User:
    return make_user(db_session, "testuser")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing ownership scenarios."""
    return make_user(db_session, "seconduser")


@pytest.fixture
def superuser(db_session: Session) -> User:
    """Create a superuser for testing moderation scenarios."""
    return make_user(db_session, "admin", is_superuser=True)


@pytest.fixture
def review_store(db_session: Session):
    """A review store wired to recompute ratings, as in the API."""
    return create_review_store(db_session)


@pytest.fixture
def sample_review(review_store, sample_book: Book, sample_user: User) -> Review:
    """Create a 4-star review through the store so the book's rating is current."""
    return review_store.create_review(
        book_id=sample_book.id,
        author_id=sample_user.id,
        rating=4,
        comment="I really enjoyed reading this book.",
    )
