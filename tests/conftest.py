"""
pytest Fixtures for Bookstore Tests

Shared fixtures used across all test files.

For database tests we use SQLite in-memory:
- Fast: No disk I/O, runs in memory
- Isolated: Each test gets a fresh engine and an empty books table
- Simple: No external database needed

Handler tests that need a failing or observable data source use a
MagicMock shaped like the Database class instead of a real engine.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, insert
from sqlalchemy.pool import StaticPool

from bookstore.database import Database, create_tables, drop_tables
from bookstore.dependencies import get_database
from bookstore.main import app
from bookstore.models import Book


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def engine():
    """
    Create a SQLite in-memory database engine with the books table.

    StaticPool keeps a single connection alive for the whole test.
    Without it, the in-memory database would disappear between connections.
    check_same_thread=False lets FastAPI's worker threads use it.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)

    yield engine

    drop_tables(engine)
    engine.dispose()


@pytest.fixture
def database(engine) -> Database:
    """Data access object over the test engine."""
    return Database(engine)


@pytest.fixture
def client(database: Database) -> Generator[TestClient, None, None]:
    """
    Create a test client backed by the test database.

    We override the get_database dependency so handlers receive the
    in-memory Database instead of the one opened at startup.
    """
    app.dependency_overrides[get_database] = lambda: database

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def fake_database() -> MagicMock:
    """A Database substitute whose calls can be asserted or made to fail."""
    return MagicMock(spec=Database)


@pytest.fixture
def fake_client(fake_database: MagicMock) -> Generator[TestClient, None, None]:
    """Test client whose handlers receive fake_database."""
    app.dependency_overrides[get_database] = lambda: fake_database

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_book(database: Database) -> Book:
    """Insert one book and return it."""
    book = Book(
        isbn="978-1470184841",
        title="Metamorphosis",
        author="Franz Kafka",
        price=Decimal("5.90"),
    )
    database.execute(
        insert(Book).values(
            isbn=book.isbn, title=book.title, author=book.author, price=book.price
        )
    )
    return book


@pytest.fixture
def multiple_books(database: Database) -> list[Book]:
    """Insert three books in ISBN order."""
    books = [
        Book(isbn="978-0141439518", title="Pride and Prejudice", author="Jane Austen", price=Decimal("9.99")),
        Book(isbn="978-0451524935", title="1984", author="George Orwell", price=Decimal("12.50")),
        Book(isbn="978-1503280786", title="Moby Dick", author="Herman Melville", price=Decimal("7")),
    ]
    for book in books:
        database.execute(
            insert(Book).values(
                isbn=book.isbn, title=book.title, author=book.author, price=book.price
            )
        )
    return books
