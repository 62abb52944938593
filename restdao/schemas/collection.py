"""
Pydantic models for paged collection responses.
"""

from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from restdao.utils.pagination import LIMIT_PARAM, OFFSET_PARAM, Pagination

QueryParams = Union[Mapping[str, Union[str, Sequence[str]]], Sequence[Tuple[str, str]]]


class CollectionRequest(BaseModel):
    """
    Everything needed to build a collection response, validated once.

    Attributes:
        base_url (str): Canonical address of the collection, without query string
        pagination (Pagination): Window requested by the client
        query_params (List[Tuple[str, str]]): Pass-through parameters, offset and limit removed
        total_count (int): Number of items in the whole collection
        items (List[Any]): Items of the requested page
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    base_url: str
    pagination: Pagination = Field(default_factory=Pagination)
    query_params: List[Tuple[str, str]] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    items: List[Any] = Field(default_factory=list)

    @field_validator("query_params", mode="before")
    @classmethod
    def _flatten_query_params(cls, value: Any) -> List[Tuple[str, str]]:
        if value is None:
            return []
        if hasattr(value, "multi_items"):
            pairs = list(value.multi_items())
        elif isinstance(value, Mapping):
            pairs = []
            for key, values in value.items():
                if isinstance(values, (list, tuple)):
                    pairs.extend((key, item) for item in values)
                else:
                    pairs.append((key, values))
        else:
            pairs = list(value)
        return [(str(key), str(item)) for key, item in pairs if key not in (OFFSET_PARAM, LIMIT_PARAM)]


class CollectionResponse(BaseModel):
    """
    Paged collection with its navigation links.

    Absent links (no previous page, no next page) are None and serialize as
    empty strings.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    current: str
    first: str
    last: str
    previous: Optional[str] = None
    next: Optional[str] = None
    offset: int
    limit: int
    total_count: int = Field(serialization_alias="totalNumberOfItems", validation_alias="totalNumberOfItems")
    items: List[Any] = Field(default_factory=list)

    @field_serializer("previous", "next")
    def _serialize_absent_link(self, value: Optional[str]) -> str:
        return value or ""

    def to_json_dict(self) -> dict:
        """Return the JSON shape of the response."""
        return self.model_dump(mode="json", by_alias=True)
