"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures and configuration for all tests: an
in-memory SQLite engine holding a ``books`` table, and a DAO over it.
"""

import sys
from pathlib import Path
from typing import List

import pytest
from sqlalchemy import create_engine, event, text
from sqlalchemy.pool import StaticPool

# Add the project root directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from restdao.repositories.base import DatabaseDAO
from restdao.repositories.mapper import ModelMapper
from restdao.repositories.queries import TableQueries

from tests.utils import BOOK_COLUMNS, Book, StatementRecorder


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine with an empty books table."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE books ("
            " id VARCHAR(36) PRIMARY KEY,"
            " title TEXT NOT NULL,"
            " author TEXT NOT NULL,"
            " pages INTEGER NOT NULL)"
        ))
    yield engine
    engine.dispose()


@pytest.fixture
def recorder(engine) -> StatementRecorder:
    """Record every statement executed on the engine."""
    recorder = StatementRecorder()
    event.listen(engine, "before_cursor_execute", recorder)
    yield recorder
    event.remove(engine, "before_cursor_execute", recorder)


@pytest.fixture
def book_queries() -> TableQueries:
    return TableQueries("books", BOOK_COLUMNS, order_by="title")


@pytest.fixture
def book_mapper() -> ModelMapper:
    return ModelMapper(Book, BOOK_COLUMNS)


@pytest.fixture
def dao(engine, book_mapper, book_queries) -> DatabaseDAO:
    """Create a DAO over the books table."""
    dao = DatabaseDAO(engine, book_mapper, book_queries)
    yield dao
    dao.close()


@pytest.fixture
def books() -> List[Book]:
    """Ten books, sorted by title."""
    return [
        Book(id=f"book-{index:02d}", title=f"Title {index:02d}", author="Author", pages=100 + index)
        for index in range(10)
    ]


@pytest.fixture
def stored_books(dao, books) -> List[Book]:
    """Store the ten books and return them."""
    for book in books:
        dao.set(book)
    return books
