"""
Query catalog and prepared queries.

A catalog supplies the seven query texts the DAO needs. The texts use
SQLAlchemy named bind syntax (``:name``). The two list queries are bound by
name and must declare exactly ``:offset`` and ``:limit``; every other query
is bound positionally, in the order its parameters first appear in the
text.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Dialect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import TextClause

from restdao.exceptions import ExecutionError, QueryPreparationError

logger = logging.getLogger(__name__)

PAGINATION_PARAMETERS = ("offset", "limit")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class QueryKind(str, Enum):
    """The seven queries a DAO executes."""

    GET_ALL_ENTITIES = "get_all_entities"
    GET_ALL_IDS = "get_all_ids"
    TOTAL_NUMBER_OF_ENTITIES = "total_number_of_entities"
    GET = "get"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class Queries(ABC):
    """Supplies one parameterized query text per QueryKind."""

    @abstractmethod
    def get_all_entities(self) -> str:
        """Page of full rows, bound to :offset and :limit."""

    @abstractmethod
    def get_all_ids(self) -> str:
        """Page of identifier rows, bound to :offset and :limit."""

    @abstractmethod
    def total_number_of_entities(self) -> str:
        """Single row, single column count. No parameters."""

    @abstractmethod
    def get(self) -> str:
        """Rows matching one identifier."""

    @abstractmethod
    def insert(self) -> str:
        """Insert bound in Mapper.to_fields order."""

    @abstractmethod
    def update(self) -> str:
        """Update bound in Mapper.to_fields order."""

    @abstractmethod
    def delete(self) -> str:
        """Delete rows matching one identifier."""

    def text_for(self, kind: QueryKind) -> str:
        return getattr(self, kind.value)()


@dataclass(frozen=True)
class PreparedQuery:
    """
    A query text compiled once, with its bind parameter names in order.

    Attributes:
        kind (QueryKind): Which catalog query this is
        sql (str): Query text as supplied by the catalog
        statement (TextClause): Compiled-once SQLAlchemy statement
        parameter_names (Tuple[str, ...]): Bind names in first-appearance order
    """

    kind: QueryKind
    sql: str
    statement: TextClause
    parameter_names: Tuple[str, ...]

    def bind(self, *values: Any) -> Dict[str, Any]:
        """Bind values positionally to the query parameters."""
        if len(values) != len(self.parameter_names):
            raise ExecutionError(
                f"Query '{self.kind.value}' expects {len(self.parameter_names)} parameters "
                f"({', '.join(self.parameter_names)}) but got {len(values)}",
                query=self.kind.value,
                parameters=values,
            )
        return dict(zip(self.parameter_names, values))


_EXPECTED_ARITY = {
    QueryKind.TOTAL_NUMBER_OF_ENTITIES: 0,
    QueryKind.GET: 1,
    QueryKind.DELETE: 1,
}


def prepare_query(kind: QueryKind, sql: str, dialect: Optional[Dialect] = None) -> PreparedQuery:
    """
    Compile a query text and check its parameters against what the DAO binds.

    Args:
        kind (QueryKind): Which query is being prepared
        sql (str): Query text
        dialect (Optional[Dialect]): Dialect to compile against, usually engine.dialect

    Returns:
        PreparedQuery: The prepared query

    Raises:
        QueryPreparationError: If the text is empty, fails to compile or has the wrong parameters
    """
    if not isinstance(sql, str) or not sql.strip():
        raise QueryPreparationError(
            f"Error when preparing {kind.value}: empty query", query=kind.value, text=sql
        )
    try:
        statement = text(sql)
        compiled = statement.compile(dialect=dialect)
        names = tuple(compiled.params)
    except SQLAlchemyError as e:
        raise QueryPreparationError(
            f"Error when preparing {kind.value} '{sql}': {e}", query=kind.value, text=sql
        ) from e

    if kind in (QueryKind.GET_ALL_ENTITIES, QueryKind.GET_ALL_IDS):
        if sorted(names) != sorted(PAGINATION_PARAMETERS):
            raise QueryPreparationError(
                f"Error when preparing {kind.value} '{sql}': expected parameters "
                f":offset and :limit, found {_describe(names)}",
                query=kind.value,
                text=sql,
            )
    elif kind in _EXPECTED_ARITY:
        if len(names) != _EXPECTED_ARITY[kind]:
            raise QueryPreparationError(
                f"Error when preparing {kind.value} '{sql}': expected "
                f"{_EXPECTED_ARITY[kind]} parameters, found {_describe(names)}",
                query=kind.value,
                text=sql,
            )
    elif not names:
        raise QueryPreparationError(
            f"Error when preparing {kind.value} '{sql}': no parameters to bind entity fields to",
            query=kind.value,
            text=sql,
        )

    logger.debug(f"Prepared {kind.value} query with parameters {list(names)}")
    return PreparedQuery(kind=kind, sql=sql, statement=statement, parameter_names=names)


def _describe(names: Sequence[str]) -> str:
    if not names:
        return "none"
    return ", ".join(f":{name}" for name in names)


@dataclass(frozen=True)
class PreparedQueries:
    """The seven prepared queries owned by one DAO."""

    get_all_entities: PreparedQuery
    get_all_ids: PreparedQuery
    total_number_of_entities: PreparedQuery
    get: PreparedQuery
    insert: PreparedQuery
    update: PreparedQuery
    delete: PreparedQuery


def prepare_queries(queries: Queries, dialect: Optional[Dialect] = None) -> PreparedQueries:
    """
    Prepare every query of a catalog, failing on the first one that does not prepare.

    Args:
        queries (Queries): Catalog supplying the query texts
        dialect (Optional[Dialect]): Dialect to compile against

    Returns:
        PreparedQueries: All seven prepared queries
    """
    prepared = {kind.value: prepare_query(kind, queries.text_for(kind), dialect) for kind in QueryKind}
    return PreparedQueries(**prepared)


class TableQueries(Queries):
    """
    Catalog of the standard queries for a single table.

    The update statement lists every column, the identifier included, in
    ``columns`` order so that its bind order is the insert bind order.

    Attributes:
        table (str): Table name
        columns (List[str]): Column names, in Mapper.to_fields order
        id_column (str): Primary key column
        order_by (Optional[str]): Column list pages are sorted on, if any
    """

    def __init__(
        self,
        table: str,
        columns: Sequence[str],
        id_column: str = "id",
        order_by: Optional[str] = None,
    ):
        for name in [table, id_column, *columns] + ([order_by] if order_by else []):
            if not _IDENTIFIER.match(name or ""):
                raise QueryPreparationError(f"'{name}' is not a valid SQL identifier", text=name)
        if id_column not in columns:
            raise QueryPreparationError(
                f"Identifier column '{id_column}' must be one of the columns of '{table}'",
                text=id_column,
            )
        self.table = table
        self.columns = list(columns)
        self.id_column = id_column
        self.order_by = order_by

    def _page(self, select_list: str) -> str:
        order = f" ORDER BY {self.order_by}" if self.order_by else ""
        return f"SELECT {select_list} FROM {self.table}{order} LIMIT :limit OFFSET :offset"

    def get_all_entities(self) -> str:
        return self._page(", ".join(self.columns))

    def get_all_ids(self) -> str:
        return self._page(self.id_column)

    def total_number_of_entities(self) -> str:
        return f"SELECT COUNT(*) FROM {self.table}"

    def get(self) -> str:
        return f"SELECT {', '.join(self.columns)} FROM {self.table} WHERE {self.id_column} = :{self.id_column}"

    def insert(self) -> str:
        binds = ", ".join(f":{column}" for column in self.columns)
        return f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES ({binds})"

    def update(self) -> str:
        assignments = ", ".join(f"{column} = :{column}" for column in self.columns)
        return f"UPDATE {self.table} SET {assignments} WHERE {self.id_column} = :{self.id_column}"

    def delete(self) -> str:
        return f"DELETE FROM {self.table} WHERE {self.id_column} = :{self.id_column}"
