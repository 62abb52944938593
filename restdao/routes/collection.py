"""
Router for a DAO-backed resource collection.

This module exposes one resource over HTTP:
- Listing a page of the collection, as item URLs or expanded entities
- Reading a single entity
- Creating or updating an entity (upsert)
- Deleting an entity
- Answering CORS preflight requests, when an allowed origin is configured
"""

import logging
from typing import List, Optional, Sequence, Type

from fastapi import APIRouter, HTTPException, Request, Response, params, status
from fastapi.responses import JSONResponse, PlainTextResponse

from restdao.models.base import Resource, StringIdentifier
from restdao.repositories.base import DatabaseDAO
from restdao.schemas.collection import CollectionRequest
from restdao.utils.links import build_collection_response, item_url, item_urls
from restdao.utils.pagination import EXPAND_PARAM, Pagination, parse_bool

logger = logging.getLogger(__name__)

_METHOD_ORDER = {"GET": 0, "PUT": 1, "DELETE": 2, "OPTIONS": 3}


def request_base_url(request: Request) -> str:
    """Scheme, host and path of the request URL, without query string."""
    return str(request.url.replace(query="", fragment=""))


class CollectionController:
    """
    HTTP controller for one resource collection.

    Attributes:
        base_path (str): Path of the collection, without slashes
        dao (DatabaseDAO): DAO the collection is read from and written to
        entity_model (Type[Resource]): Model request bodies are parsed into
        allowed_origin (Optional[str]): Origin allowed by CORS preflight replies
        default_limit (int): Limit used when a request carries none; 0 is unlimited
        dependencies (List[params.Depends]): Dependencies run before every route, e.g. authentication
        router (APIRouter): Routes of the collection
    """

    def __init__(
        self,
        base_path: str,
        dao: DatabaseDAO,
        entity_model: Type[Resource],
        allowed_origin: Optional[str] = None,
        default_limit: int = 0,
        dependencies: Optional[Sequence[params.Depends]] = None,
    ):
        self.base_path = base_path.strip("/")
        self.dao = dao
        self.entity_model = entity_model
        self.allowed_origin = allowed_origin or None
        self.default_limit = default_limit
        self.dependencies = list(dependencies or [])
        self.router = self._build_router()

    @property
    def path(self) -> str:
        return f"/{self.base_path}"

    def methods(self) -> List[str]:
        """HTTP methods served by the collection, in registration order."""
        methods = []
        for route in self.router.routes:
            for method in sorted(route.methods, key=lambda m: _METHOD_ORDER.get(m, len(_METHOD_ORDER))):
                if method not in methods:
                    methods.append(method)
        return methods

    def _build_router(self) -> APIRouter:
        router = APIRouter(tags=[self.base_path], dependencies=self.dependencies)
        entity_model = self.entity_model

        @router.get(self.path)
        def get_all(request: Request) -> JSONResponse:
            """List a page of the collection."""
            query_params = request.query_params
            pagination = Pagination.from_query_params(query_params, default_limit=self.default_limit)
            expand = parse_bool(query_params.get(EXPAND_PARAM))
            base_url = request_base_url(request)

            if expand:
                items = self.dao.get_all_entities(pagination)
            else:
                items = item_urls(base_url, self.dao.get_all_ids(pagination))
            total = self.dao.total_number_of_entities()

            response = build_collection_response(
                CollectionRequest(
                    base_url=base_url,
                    pagination=pagination,
                    query_params=query_params,
                    total_count=total,
                    items=items,
                )
            )
            return JSONResponse(content=response.to_json_dict())

        @router.get(self.path + "/{id}")
        def get(id: str) -> JSONResponse:
            """Get one entity."""
            entity = self.dao.get(StringIdentifier(id))
            if entity is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"No {self.base_path} entity identified by '{id}'",
                )
            return JSONResponse(content=entity.model_dump(mode="json"))

        @router.put(self.path)
        def update(entity: entity_model, request: Request) -> PlainTextResponse:
            """Create or update an entity and return its URL."""
            identifier = self.dao.set(entity)
            logger.info(f"Stored {self.base_path} entity '{identifier}'")
            return PlainTextResponse(item_url(request_base_url(request), identifier))

        @router.delete(self.path + "/{id}")
        def delete(id: str) -> Response:
            """Delete an entity, whether it exists or not."""
            self.dao.delete(StringIdentifier(id))
            return Response(status_code=status.HTTP_200_OK)

        if self.allowed_origin:
            @router.options(self.path)
            def options() -> Response:
                """Answer a CORS preflight request."""
                allowed_methods = ",".join(self.methods())
                return Response(
                    status_code=status.HTTP_200_OK,
                    headers={
                        "Allow": allowed_methods,
                        "Access-Control-Allow-Origin": self.allowed_origin,
                        "Access-Control-Allow-Methods": allowed_methods,
                        "Access-Control-Allow-Headers": "*",
                    },
                )

        return router
