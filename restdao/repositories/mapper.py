"""
Row mapping between query results and entities.

A Mapper is the only piece of the DAO that knows the shape of an entity:
it decodes result rows into entities or identifiers and flattens an entity
into the positional parameters expected by the insert and update queries.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, List, Mapping, Sequence, Type, TypeVar

from pydantic import ValidationError

from restdao.exceptions import MappingError
from restdao.models.base import Identifier, Resource, StringIdentifier

E = TypeVar('E')
R = TypeVar('R', bound=Resource)


def _row_mapping(row: Any) -> Mapping[str, Any]:
    """Return a column-name mapping for a SQLAlchemy Row or a plain mapping."""
    mapping = getattr(row, "_mapping", row)
    if not isinstance(mapping, Mapping):
        raise MappingError(f"Cannot read columns from row of type {type(row).__name__}")
    return mapping


class Mapper(ABC, Generic[E]):
    """Translates result rows into entities and entities into query parameters."""

    @abstractmethod
    def to_entities(self, rows: Iterable[Any]) -> List[E]:
        """
        Decode every row into an entity.

        The rows are fully consumed; closing the underlying cursor is the
        caller's job.

        Raises:
            MappingError: If a row cannot be decoded
        """

    @abstractmethod
    def to_identifiers(self, rows: Iterable[Any]) -> List[Identifier]:
        """
        Decode every row into an identifier.

        Raises:
            MappingError: If a row carries no usable identifier
        """

    @abstractmethod
    def to_fields(self, entity: E) -> List[Any]:
        """
        Flatten an entity into the positional parameters of the write queries.

        Raises:
            MappingError: If a field is missing or invalid
        """


class ModelMapper(Mapper[R]):
    """
    Mapper for pydantic Resource models.

    Attributes:
        model (Type[R]): Resource class rows are decoded into
        fields (List[str]): Model field names, in write-query bind order
        id_column (str): Result column holding the identifier
    """

    def __init__(self, model: Type[R], fields: Sequence[str], id_column: str = "id"):
        """
        Initialize the mapper.

        Args:
            model (Type[R]): Resource class rows are decoded into
            fields (Sequence[str]): Model field names, in write-query bind order
            id_column (str): Result column holding the identifier
        """
        unknown = [field for field in fields if field not in model.model_fields]
        if unknown:
            raise ValueError(f"Unknown fields for {model.__name__}: {', '.join(unknown)}")
        self.model = model
        self.fields = list(fields)
        self.id_column = id_column

    def _to_data(self, row: Any) -> Dict[str, Any]:
        data = dict(_row_mapping(row))
        if self.id_column in data:
            value = data.pop(self.id_column)
            data["id"] = None if value is None else str(value)
        return data

    def to_entities(self, rows: Iterable[Any]) -> List[R]:
        entities = []
        for row in rows:
            data = self._to_data(row)
            try:
                entities.append(self.model.model_validate(data))
            except ValidationError as e:
                raise MappingError(
                    f"Cannot map row to {self.model.__name__}: {e}",
                    identifier=data.get("id"),
                ) from e
        return entities

    def to_identifiers(self, rows: Iterable[Any]) -> List[Identifier]:
        identifiers = []
        for row in rows:
            mapping = _row_mapping(row)
            try:
                value = mapping[self.id_column]
            except KeyError as e:
                raise MappingError(f"Column '{self.id_column}' missing from result row") from e
            if value is None:
                raise MappingError(f"Column '{self.id_column}' is null")
            identifiers.append(StringIdentifier(value))
        return identifiers

    def to_fields(self, entity: R) -> List[Any]:
        if not isinstance(entity, self.model):
            raise MappingError(
                f"Expected {self.model.__name__} but got {type(entity).__name__}"
            )
        data = entity.model_dump()
        if data.get("id") is None:
            raise MappingError(f"{self.model.__name__} has no identifier", parameters=[])

        values = []
        for field in self.fields:
            value = data[field]
            if isinstance(value, (dict, list, set, tuple)):
                raise MappingError(
                    f"Field '{field}' of {self.model.__name__} is not a scalar value",
                    identifier=data["id"],
                )
            values.append(value)
        return values
