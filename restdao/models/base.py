"""
Entity and identifier model shared by the DAO and the HTTP layer.

An entity is an opaque value; the DAO only needs to know how to read its
identifier and how to attach a new one. Attaching an identifier never
mutates the entity: a new value is returned.

Usage:
    from restdao.models.base import Resource

    class Book(Resource):
        title: str
        author: str
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from restdao.exceptions import IdentifierConflictError


@runtime_checkable
class Identifier(Protocol):
    """Anything whose string form names an entity."""

    def __str__(self) -> str:
        ...


class StringIdentifier(str):
    """Identifier backed by a plain string, e.g. a path parameter."""

    def __repr__(self) -> str:
        return f"StringIdentifier({str.__repr__(self)})"


def identifiers_equal(first: Optional[Any], second: Optional[Any]) -> bool:
    """Compare two identifiers by their string form."""
    if first is None or second is None:
        return first is None and second is None
    return str(first) == str(second)


class IdentifiableEntity(ABC):
    """Capability interface for entities the DAO can persist."""

    @abstractmethod
    def identifier(self) -> Optional[Identifier]:
        """Return the entity identifier, or None if it was never persisted."""

    @abstractmethod
    def with_id(self, identifier: Identifier) -> "IdentifiableEntity":
        """Return a copy of the entity carrying the given identifier."""


class Resource(BaseModel, IdentifiableEntity):
    """
    Immutable pydantic entity with an optional string identifier.

    Attributes:
        id (Optional[str]): Identifier of the resource, None until persisted
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None

    def identifier(self) -> Optional[StringIdentifier]:
        if self.id is None or self.id == "":
            return None
        return StringIdentifier(self.id)

    def with_id(self, identifier: Identifier) -> "Resource":
        """
        Attach an identifier to the resource.

        Args:
            identifier (Identifier): Identifier to attach

        Returns:
            Resource: New resource carrying the identifier

        Raises:
            IdentifierConflictError: If the resource already has a different identifier
        """
        current = self.identifier()
        if current is not None and not identifiers_equal(current, identifier):
            raise IdentifierConflictError(
                f"Cannot set ID '{identifier}' on {type(self).__name__} already identified by '{current}'",
                identifier=current,
            )
        return self.model_copy(update={"id": str(identifier)})
