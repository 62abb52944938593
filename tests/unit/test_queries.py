"""
Unit tests for the query catalog and query preparation.
"""

import pytest
from sqlalchemy.dialects import sqlite

from restdao.exceptions import ExecutionError, QueryPreparationError
from restdao.repositories.queries import (
    Queries,
    QueryKind,
    TableQueries,
    prepare_queries,
    prepare_query,
)
from tests.utils import BOOK_COLUMNS


class StaticQueries(Queries):
    """Catalog returning fixed texts, overridable per kind."""

    def __init__(self, **overrides):
        self.texts = {
            "get_all_entities": "SELECT * FROM books LIMIT :limit OFFSET :offset",
            "get_all_ids": "SELECT id FROM books LIMIT :limit OFFSET :offset",
            "total_number_of_entities": "SELECT COUNT(*) FROM books",
            "get": "SELECT * FROM books WHERE id = :id",
            "insert": "INSERT INTO books (id, title) VALUES (:id, :title)",
            "update": "UPDATE books SET title = :title WHERE id = :id",
            "delete": "DELETE FROM books WHERE id = :id",
        }
        self.texts.update(overrides)

    def get_all_entities(self):
        return self.texts["get_all_entities"]

    def get_all_ids(self):
        return self.texts["get_all_ids"]

    def total_number_of_entities(self):
        return self.texts["total_number_of_entities"]

    def get(self):
        return self.texts["get"]

    def insert(self):
        return self.texts["insert"]

    def update(self):
        return self.texts["update"]

    def delete(self):
        return self.texts["delete"]


class TestPrepareQuery:
    """Tests for prepare_query."""

    def test_records_parameters_in_order(self):
        query = prepare_query(QueryKind.INSERT, "INSERT INTO t (a, b, c) VALUES (:c, :a, :b)")
        assert query.parameter_names == ("c", "a", "b")

    def test_repeated_parameter_is_bound_once(self):
        query = prepare_query(QueryKind.UPDATE, "UPDATE t SET id = :id, a = :a WHERE id = :id")
        assert query.parameter_names == ("id", "a")

    def test_bind_positionally(self):
        query = prepare_query(QueryKind.GET, "SELECT * FROM t WHERE id = :key")
        assert query.bind("42") == {"key": "42"}

    def test_bind_wrong_arity(self):
        query = prepare_query(QueryKind.INSERT, "INSERT INTO t (a, b) VALUES (:a, :b)")
        with pytest.raises(ExecutionError) as exc_info:
            query.bind(1)
        assert exc_info.value.query == "insert"
        assert exc_info.value.parameters == [1]

    def test_compiles_against_dialect(self):
        query = prepare_query(QueryKind.GET, "SELECT * FROM t WHERE id = :id", sqlite.dialect())
        assert query.parameter_names == ("id",)

    @pytest.mark.parametrize("sql", ["", "   ", None])
    def test_empty_query(self, sql):
        with pytest.raises(QueryPreparationError) as exc_info:
            prepare_query(QueryKind.DELETE, sql)
        assert exc_info.value.query == "delete"

    @pytest.mark.parametrize("sql", [
        "SELECT * FROM t LIMIT :limit",
        "SELECT * FROM t LIMIT :size OFFSET :start",
        "SELECT * FROM t LIMIT :limit OFFSET :offset WHERE a = :a",
    ])
    def test_list_queries_need_offset_and_limit(self, sql):
        with pytest.raises(QueryPreparationError) as exc_info:
            prepare_query(QueryKind.GET_ALL_IDS, sql)
        assert "get_all_ids" in str(exc_info.value)

    def test_list_query_parameters_in_any_order(self):
        query = prepare_query(QueryKind.GET_ALL_ENTITIES, "SELECT * FROM t LIMIT :offset, :limit")
        assert set(query.parameter_names) == {"offset", "limit"}

    def test_count_takes_no_parameters(self):
        with pytest.raises(QueryPreparationError):
            prepare_query(QueryKind.TOTAL_NUMBER_OF_ENTITIES, "SELECT COUNT(*) FROM t WHERE a = :a")

    @pytest.mark.parametrize("kind", [QueryKind.GET, QueryKind.DELETE])
    def test_single_identifier_parameter(self, kind):
        with pytest.raises(QueryPreparationError):
            prepare_query(kind, "DELETE FROM t WHERE a = :a AND b = :b")
        with pytest.raises(QueryPreparationError):
            prepare_query(kind, "DELETE FROM t")

    @pytest.mark.parametrize("kind", [QueryKind.INSERT, QueryKind.UPDATE])
    def test_writes_need_parameters(self, kind):
        with pytest.raises(QueryPreparationError):
            prepare_query(kind, "DELETE FROM t")


class TestPrepareQueries:
    """Tests for prepare_queries."""

    def test_prepares_every_kind(self):
        prepared = prepare_queries(StaticQueries())
        for kind in QueryKind:
            assert getattr(prepared, kind.value).kind == kind

    def test_names_the_failing_query(self):
        with pytest.raises(QueryPreparationError) as exc_info:
            prepare_queries(StaticQueries(update=""))
        assert exc_info.value.query == "update"


class TestTableQueries:
    """Tests for TableQueries."""

    @pytest.fixture
    def queries(self):
        return TableQueries("books", BOOK_COLUMNS)

    def test_texts(self, queries):
        assert queries.get_all_entities() == "SELECT id, title, author, pages FROM books LIMIT :limit OFFSET :offset"
        assert queries.get_all_ids() == "SELECT id FROM books LIMIT :limit OFFSET :offset"
        assert queries.total_number_of_entities() == "SELECT COUNT(*) FROM books"
        assert queries.get() == "SELECT id, title, author, pages FROM books WHERE id = :id"
        assert queries.insert() == "INSERT INTO books (id, title, author, pages) VALUES (:id, :title, :author, :pages)"
        assert queries.delete() == "DELETE FROM books WHERE id = :id"

    def test_order_by(self):
        queries = TableQueries("books", BOOK_COLUMNS, order_by="title")
        assert queries.get_all_ids() == "SELECT id FROM books ORDER BY title LIMIT :limit OFFSET :offset"

    def test_insert_and_update_bind_in_the_same_order(self, queries):
        prepared = prepare_queries(queries)
        assert prepared.insert.parameter_names == tuple(BOOK_COLUMNS)
        assert prepared.update.parameter_names == tuple(BOOK_COLUMNS)

    def test_update_order_follows_columns(self):
        queries = TableQueries("books", ["title", "id"])
        prepared = prepare_queries(queries)
        assert prepared.update.parameter_names == ("title", "id")
        assert prepared.insert.parameter_names == ("title", "id")

    @pytest.mark.parametrize("table,columns", [
        ("books; DROP TABLE x", BOOK_COLUMNS),
        ("books", ["id", "title author"]),
        ("books", ["title", "author"]),
    ])
    def test_invalid_definitions(self, table, columns):
        with pytest.raises(QueryPreparationError):
            TableQueries(table, columns)
