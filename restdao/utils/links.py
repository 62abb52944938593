"""
Navigation links for paged collection responses.

Every link is built by ``collection_url``: the collection base URL, then
``offset=O&limit=L`` unless the limit is unlimited, then the pass-through
query parameters sorted by name. For an unlimited page the last, previous
and next links are the bare base URL.
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple
from urllib.parse import quote, urlencode, urlsplit

from restdao.exceptions import LinkBuildError
from restdao.schemas.collection import CollectionRequest, CollectionResponse
from restdao.utils.pagination import UNLIMITED

logger = logging.getLogger(__name__)


def check_base_url(base_url: str) -> str:
    """
    Make sure a base URL parses and carries no query string or fragment.

    Relative URLs such as ``/books`` are accepted; links built from them
    stay relative.

    Raises:
        LinkBuildError: If the URL is malformed
    """
    try:
        parts = urlsplit(base_url)
        parts.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise LinkBuildError(f"Malformed base URL '{base_url}': {e}", operation="base", url=base_url) from e
    if parts.query or parts.fragment:
        raise LinkBuildError(
            f"Base URL '{base_url}' must not carry a query string or fragment",
            operation="base",
            url=base_url,
        )
    return base_url


def encode_query_params(query_params: Sequence[Tuple[str, str]]) -> str:
    """Encode pass-through parameters, sorted by name, values kept in order."""
    try:
        return urlencode(sorted(query_params, key=lambda pair: pair[0]))
    except (TypeError, UnicodeError) as e:
        raise LinkBuildError(f"Encoding query parameters {query_params!r}: {e}", operation="encode") from e


def collection_url(
    base_url: str,
    offset: int,
    limit: int,
    query_params: Sequence[Tuple[str, str]] = (),
) -> str:
    """
    Build the URL of one page of the collection.

    Args:
        base_url (str): Collection base URL
        offset (int): Page offset
        limit (int): Normalized page limit; UNLIMITED drops offset and limit
        query_params (Sequence[Tuple[str, str]]): Pass-through parameters

    Returns:
        str: Page URL
    """
    parts = []
    if 0 < limit < UNLIMITED:
        parts.append(f"offset={offset}&limit={limit}")
    encoded = encode_query_params(query_params)
    if encoded:
        parts.append(encoded)
    if not parts:
        return base_url
    return base_url + "?" + "&".join(parts)


def last_offset(limit: int, total_count: int) -> int:
    """Offset of the last page, 0 for an empty collection."""
    pages = total_count // limit
    if total_count % limit == 0:
        pages -= 1
    return max(pages * limit, 0)


def last_url(base_url: str, limit: int, total_count: int, query_params: Sequence[Tuple[str, str]] = ()) -> str:
    if limit >= UNLIMITED:
        return base_url
    return collection_url(base_url, last_offset(limit, total_count), limit, query_params)


def previous_url(
    base_url: str, offset: int, limit: int, query_params: Sequence[Tuple[str, str]] = ()
) -> Optional[str]:
    if limit >= UNLIMITED:
        return base_url
    if offset <= 0:
        return None
    return collection_url(base_url, max(offset - limit, 0), limit, query_params)


def next_url(
    base_url: str,
    offset: int,
    limit: int,
    total_count: int,
    query_params: Sequence[Tuple[str, str]] = (),
) -> Optional[str]:
    if limit >= UNLIMITED:
        return base_url
    if offset + limit < total_count:
        return collection_url(base_url, offset + limit, limit, query_params)
    return None


def item_url(base_url: str, identifier: Any) -> str:
    """URL of a single collection item."""
    return f"{base_url.rstrip('/')}/{quote(str(identifier), safe='')}"


def item_urls(base_url: str, identifiers: Sequence[Any]) -> List[str]:
    return [item_url(base_url, identifier) for identifier in identifiers]


def build_collection_response(request: CollectionRequest) -> CollectionResponse:
    """
    Compute the navigation links of a page and assemble the response.

    Args:
        request (CollectionRequest): Validated collection request

    Returns:
        CollectionResponse: Response with current, first, last, previous and next links

    Raises:
        LinkBuildError: If any link cannot be built; no partial response is returned
    """
    base_url = check_base_url(request.base_url)
    offset = request.pagination.offset
    limit = request.pagination.limit
    params = request.query_params
    total = request.total_count

    response = CollectionResponse(
        current=collection_url(base_url, offset, limit, params),
        first=collection_url(base_url, 0, limit, params),
        last=last_url(base_url, limit, total, params),
        previous=previous_url(base_url, offset, limit, params),
        next=next_url(base_url, offset, limit, total, params),
        offset=offset,
        limit=limit,
        total_count=total,
        items=request.items,
    )
    logger.debug(f"Built collection response for {response.current} ({total} items in total)")
    return response
