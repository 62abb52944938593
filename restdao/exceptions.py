"""
Custom exceptions for the data-access and collection layer.

Every error keeps the context it was raised with (query kind, identifier,
bound parameters) so callers can wrap it into a user-facing response.
Nothing in this package retries; an error always aborts the operation.
"""

from typing import Any, Optional, Sequence


class RestDaoError(Exception):
    """Base exception for all errors raised by restdao."""
    pass


class PersistenceError(RestDaoError):
    """Base exception for errors raised while talking to the backing store."""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        identifier: Any = None,
        parameters: Optional[Sequence[Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.query = query
        self.identifier = identifier
        self.parameters = list(parameters) if parameters is not None else None


class QueryPreparationError(PersistenceError):
    """Raised when a query text fails to prepare."""

    def __init__(self, message: str, query: Optional[str] = None, text: Optional[str] = None):
        super().__init__(message, query=query)
        self.text = text


class ExecutionError(PersistenceError):
    """Raised when a prepared query fails to execute."""
    pass


class MappingError(PersistenceError):
    """Raised when a row cannot be decoded or an entity cannot be flattened."""
    pass


class AmbiguousResultError(PersistenceError):
    """Raised when more than one entity is found for a single identifier."""

    def __init__(self, identifier: Any, count: int, query: Optional[str] = None):
        super().__init__(
            f"Expected only one entity identified by '{identifier}' but got {count}",
            query=query,
            identifier=identifier,
        )
        self.count = count


class IdentifierConflictError(PersistenceError):
    """Raised when attaching an identifier to an entity that already has another one."""
    pass


class PaginationError(RestDaoError, ValueError):
    """Raised when pagination query parameters cannot be parsed."""

    def __init__(self, message: str, parameter: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.parameter = parameter
        self.value = value


class LinkBuildError(RestDaoError):
    """Raised when a collection response link cannot be built."""

    def __init__(self, message: str, operation: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.url = url
