"""
This package contains the generic DAO and the pieces it is assembled from.

A DAO for a resource is built from a row Mapper, a query catalog and an
identifier generator:

    dao = DatabaseDAO(engine, ModelMapper(Book, ["id", "title"]), TableQueries("books", ["id", "title"]))
"""

from restdao.repositories.base import DatabaseDAO
from restdao.repositories.identifiers import IdentifierGenerator, UUIDIdentifierGenerator
from restdao.repositories.mapper import Mapper, ModelMapper
from restdao.repositories.queries import (
    PreparedQueries,
    PreparedQuery,
    Queries,
    QueryKind,
    TableQueries,
    prepare_queries,
    prepare_query,
)

__all__ = [
    "DatabaseDAO",
    "IdentifierGenerator",
    "Mapper",
    "ModelMapper",
    "PreparedQueries",
    "PreparedQuery",
    "Queries",
    "QueryKind",
    "TableQueries",
    "UUIDIdentifierGenerator",
    "prepare_queries",
    "prepare_query",
]
