"""
Generic DAO executing catalog queries for one entity type.

This module provides the data-access object that turns list, count, get,
upsert and delete calls into prepared query executions. The DAO is written
once and specialized per resource by handing it a Mapper, a query catalog
and an identifier generator.

Upsert is a check-then-act sequence: ``set`` looks the identifier up, then
runs either the insert or the update query in a separate transaction. Two
concurrent ``set`` calls for the same new identifier can both decide to
insert, and an update can race a delete. Callers needing an atomic upsert
must provide it in the storage layer, for example with an insert or update
query that resolves conflicts natively.
"""

import logging
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from sqlalchemy.engine import Engine, Result
from sqlalchemy.exc import SQLAlchemyError

from restdao.exceptions import AmbiguousResultError, ExecutionError
from restdao.models.base import IdentifiableEntity, Identifier
from restdao.repositories.identifiers import IdentifierGenerator, UUIDIdentifierGenerator
from restdao.repositories.mapper import Mapper
from restdao.repositories.queries import PreparedQueries, PreparedQuery, Queries, prepare_queries
from restdao.utils.pagination import Pagination

E = TypeVar('E', bound=IdentifiableEntity)
T = TypeVar('T')

logger = logging.getLogger(__name__)


class DatabaseDAO(Generic[E]):
    """
    Data-access object backed by a SQLAlchemy engine.

    Every query of the catalog is prepared once, when the DAO is built. The
    prepared queries are read-only afterwards and shared by all callers; each
    operation checks out its own connection from the engine.

    Attributes:
        engine (Engine): SQLAlchemy engine, owned by the caller
        mapper (Mapper[E]): Row mapper for the entity type
        id_generator (IdentifierGenerator): Generator for new identifiers
    """

    def __init__(
        self,
        engine: Engine,
        mapper: Mapper[E],
        queries: Queries,
        id_generator: Optional[IdentifierGenerator] = None,
    ):
        """
        Prepare the catalog queries and build the DAO.

        Args:
            engine (Engine): SQLAlchemy engine the queries run on
            mapper (Mapper[E]): Row mapper for the entity type
            queries (Queries): Catalog supplying the seven query texts
            id_generator (Optional[IdentifierGenerator]): Defaults to random UUIDs

        Raises:
            QueryPreparationError: If any of the queries fails to prepare
        """
        self.engine = engine
        self.mapper = mapper
        self.id_generator = id_generator or UUIDIdentifierGenerator()
        self._queries: Optional[PreparedQueries] = prepare_queries(queries, engine.dialect)

    def close(self) -> None:
        """Release the prepared queries. The DAO cannot be used afterwards."""
        self._queries = None

    def __enter__(self) -> "DatabaseDAO[E]":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @property
    def queries(self) -> PreparedQueries:
        if self._queries is None:
            raise ExecutionError("DAO has been closed")
        return self._queries

    def get_all_entities(self, pagination: Pagination) -> List[E]:
        """
        Get a page of entities, in backing-store order.

        Args:
            pagination (Pagination): Window to read

        Returns:
            List[E]: Entities of the page

        Raises:
            ExecutionError: If the query fails
            MappingError: If a row cannot be decoded
        """
        query = self.queries.get_all_entities
        params = {"offset": pagination.offset, "limit": pagination.limit}
        return self._fetch(query, params, self.mapper.to_entities)

    def get_all_ids(self, pagination: Pagination) -> List[Identifier]:
        """
        Get the identifiers of a page of entities.

        Args:
            pagination (Pagination): Window to read

        Returns:
            List[Identifier]: Identifiers of the page
        """
        query = self.queries.get_all_ids
        params = {"offset": pagination.offset, "limit": pagination.limit}
        return self._fetch(query, params, self.mapper.to_identifiers)

    def total_number_of_entities(self) -> int:
        """
        Count every entity in the backing store.

        Raises:
            ExecutionError: If the count cannot be read
        """
        query = self.queries.total_number_of_entities
        try:
            with self.engine.connect() as connection:
                count = connection.execute(query.statement).scalar_one()
        except SQLAlchemyError as e:
            raise ExecutionError(
                f"Counting number of entities in database: {e}", query=query.kind.value
            ) from e
        return int(count)

    def get(self, identifier: Identifier) -> Optional[E]:
        """
        Get the entity with the given identifier.

        Args:
            identifier (Identifier): Identifier to look up

        Returns:
            Optional[E]: The entity, or None if nothing matches

        Raises:
            AmbiguousResultError: If more than one row matches the identifier
        """
        query = self.queries.get
        entities = self._fetch(query, query.bind(str(identifier)), self.mapper.to_entities, identifier)
        if len(entities) > 1:
            raise AmbiguousResultError(identifier, len(entities), query=query.kind.value)
        if not entities:
            return None
        return entities[0]

    def set(self, entity: E) -> Identifier:
        """
        Insert the entity if it is new, update it otherwise.

        An entity without identifier gets one from the identifier generator
        and is inserted. An entity with an identifier is inserted when no row
        carries that identifier yet, and updated otherwise. The caller's
        entity is never modified.

        Args:
            entity (E): Entity to persist

        Returns:
            Identifier: The generated identifier on insert, the entity one otherwise

        Raises:
            ExecutionError: If the lookup, insert or update query fails
            MappingError: If the entity cannot be flattened into fields
        """
        identifier = entity.identifier()
        if identifier is None or str(identifier) == "":
            identifier = self.id_generator.generate(entity)
            entity = entity.with_id(identifier)
            should_insert = True
        else:
            should_insert = self.get(identifier) is None

        fields = self.mapper.to_fields(entity)
        query = self.queries.insert if should_insert else self.queries.update
        logger.debug(f"{'Inserting' if should_insert else 'Updating'} entity '{identifier}'")
        self._execute(query, query.bind(*fields), identifier)
        return entity.identifier()

    def delete(self, identifier: Identifier) -> None:
        """
        Delete the entity with the given identifier.

        Deleting an identifier that matches nothing is not an error.

        Raises:
            ExecutionError: If the delete query fails
        """
        query = self.queries.delete
        self._execute(query, query.bind(str(identifier)), identifier)

    def _fetch(
        self,
        query: PreparedQuery,
        params: Dict[str, Any],
        to_items: Callable[[Result], List[T]],
        identifier: Optional[Identifier] = None,
    ) -> List[T]:
        try:
            with self.engine.connect() as connection:
                result = connection.execute(query.statement, params)
                try:
                    return to_items(result)
                finally:
                    result.close()
        except SQLAlchemyError as e:
            raise ExecutionError(
                f"Retrieving entities from database with {query.kind.value}: {e}",
                query=query.kind.value,
                identifier=identifier,
                parameters=list(params.values()),
            ) from e

    def _execute(self, query: PreparedQuery, params: Dict[str, Any], identifier: Identifier) -> None:
        try:
            with self.engine.begin() as connection:
                connection.execute(query.statement, params)
        except SQLAlchemyError as e:
            raise ExecutionError(
                f"Executing {query.kind.value} for '{identifier}': {e}",
                query=query.kind.value,
                identifier=identifier,
                parameters=list(params.values()),
            ) from e
