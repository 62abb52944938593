"""
Test utilities for restdao.

This module provides the resource model and helpers shared by the tests.
"""

from typing import List

from restdao.models.base import Resource

BOOK_COLUMNS = ["id", "title", "author", "pages"]


class Book(Resource):
    """Resource used throughout the tests."""

    title: str
    author: str
    pages: int = 0


class StatementRecorder:
    """Records the SQL statements sent to the database."""

    def __init__(self):
        self.statements: List[str] = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        self.statements.append(statement)

    def count(self, prefix: str) -> int:
        return sum(1 for statement in self.statements if statement.lstrip().upper().startswith(prefix))

    def clear(self):
        self.statements.clear()
