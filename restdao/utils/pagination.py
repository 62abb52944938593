"""
Pagination window parsed from collection query parameters.

A limit of zero or below means "no limit". It is normalized to UNLIMITED,
the largest signed 64-bit value, everywhere a limit is bound or compared.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from restdao.exceptions import PaginationError

UNLIMITED = 2 ** 63 - 1
_INT64_MIN = -(2 ** 63)

OFFSET_PARAM = "offset"
LIMIT_PARAM = "limit"
EXPAND_PARAM = "expand"

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}
_INTEGER = re.compile(r"^[+-]?[0-9]+$")


@dataclass(frozen=True)
class Pagination:
    """
    Offset/limit window over a collection.

    Attributes:
        offset (int): Number of items skipped, never negative
        raw_limit (int): Limit as requested; zero or below means unlimited
    """

    offset: int = 0
    raw_limit: int = 0

    def __post_init__(self):
        if self.offset < 0:
            raise PaginationError(
                f"Offset must not be negative, got {self.offset}",
                parameter=OFFSET_PARAM,
                value=self.offset,
            )

    @property
    def limit(self) -> int:
        """Effective limit, UNLIMITED when the requested one is zero or below."""
        if self.raw_limit <= 0:
            return UNLIMITED
        return self.raw_limit

    @property
    def is_unlimited(self) -> bool:
        return self.limit == UNLIMITED

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any], default_limit: int = 0) -> "Pagination":
        """
        Read offset and limit from request query parameters.

        Args:
            params (Mapping[str, Any]): Query parameters; list values use their first item
            default_limit (int): Limit used when the parameters carry none

        Returns:
            Pagination: The requested window

        Raises:
            PaginationError: If offset or limit is not a 64-bit integer, or offset is negative
        """
        offset = _parse_int64(OFFSET_PARAM, _first(params, OFFSET_PARAM))
        limit = _parse_int64(LIMIT_PARAM, _first(params, LIMIT_PARAM))
        return cls(offset=offset or 0, raw_limit=default_limit if limit is None else limit)


def parse_bool(value: Optional[str], parameter: str = EXPAND_PARAM, default: bool = False) -> bool:
    """
    Parse a boolean query parameter.

    Accepts 1, t, T, TRUE, true, True, 0, f, F, FALSE, false and False.

    Raises:
        PaginationError: If the value is none of the above
    """
    if value is None or value == "":
        return default
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise PaginationError(
        f"Parsing {parameter} flag from '{value}'", parameter=parameter, value=value
    )


def _first(params: Mapping[str, Any], key: str) -> Optional[str]:
    value = params.get(key)
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _parse_int64(parameter: str, value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    if not _INTEGER.fullmatch(str(value)):
        raise PaginationError(
            f"Parsing {parameter} '{value}' into int64", parameter=parameter, value=value
        )
    number = int(str(value))
    if number < _INT64_MIN or number > UNLIMITED:
        raise PaginationError(
            f"Parsing {parameter} '{value}' into int64: value out of range",
            parameter=parameter,
            value=value,
        )
    return number
