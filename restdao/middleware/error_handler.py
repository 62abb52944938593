"""
Error handling middleware for the application.

This module maps the errors raised by the DAO, the pagination parser and
the link builder to consistent JSON error responses.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from restdao.exceptions import (
    AmbiguousResultError,
    IdentifierConflictError,
    LinkBuildError,
    MappingError,
    PaginationError,
    PersistenceError,
)
from restdao.utils.api_response import error_json_response

# Configure logging
logger = logging.getLogger(__name__)


def add_error_handlers(app: FastAPI) -> None:
    """
    Add error handlers to the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP exceptions."""
        logger.warning(f"HTTP exception: {exc.detail} (status_code={exc.status_code})")
        return error_json_response(str(exc.detail), exc.status_code, code="http_error")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle request validation errors."""
        error_messages = []
        for error in exc.errors():
            loc = " -> ".join(str(loc_item) for loc_item in error["loc"])
            error_messages.append(f"{loc}: {error['msg']}")

        logger.warning(f"Validation error: {', '.join(error_messages)}")
        return error_json_response(
            "Validation error",
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            code="validation_error",
            details={"errors": error_messages},
        )

    @app.exception_handler(PaginationError)
    async def pagination_error_handler(request: Request, exc: PaginationError) -> JSONResponse:
        """Handle malformed offset, limit or expand parameters."""
        logger.warning(f"Invalid pagination: {exc}")
        return error_json_response(
            str(exc),
            status.HTTP_400_BAD_REQUEST,
            code="invalid_pagination",
            details={"parameter": exc.parameter},
        )

    @app.exception_handler(IdentifierConflictError)
    async def identifier_conflict_handler(request: Request, exc: IdentifierConflictError) -> JSONResponse:
        """Handle an identifier that cannot be attached to an entity."""
        logger.warning(f"Identifier conflict: {exc}")
        return error_json_response(str(exc), status.HTTP_409_CONFLICT, code="identifier_conflict")

    @app.exception_handler(MappingError)
    async def mapping_error_handler(request: Request, exc: MappingError) -> JSONResponse:
        """Handle entities that cannot be mapped to or from rows."""
        logger.error(f"Mapping error: {exc}")
        if request.method in ("PUT", "POST", "PATCH"):
            return error_json_response(str(exc), status.HTTP_400_BAD_REQUEST, code="mapping_error")
        return error_json_response(
            "Stored data could not be read", status.HTTP_500_INTERNAL_SERVER_ERROR, code="mapping_error"
        )

    @app.exception_handler(AmbiguousResultError)
    async def ambiguous_result_handler(request: Request, exc: AmbiguousResultError) -> JSONResponse:
        """Handle identifiers matching more than one entity."""
        logger.error(f"Ambiguous result: {exc}")
        return error_json_response(
            str(exc),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="ambiguous_result",
            details={"identifier": str(exc.identifier), "count": exc.count},
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        """Handle database errors."""
        logger.error(f"Database error in {exc.query}: {exc}")
        return error_json_response(
            "Database error occurred", status.HTTP_500_INTERNAL_SERVER_ERROR, code="database_error"
        )

    @app.exception_handler(LinkBuildError)
    async def link_error_handler(request: Request, exc: LinkBuildError) -> JSONResponse:
        """Handle collection links that cannot be built."""
        logger.error(f"Link error ({exc.operation}): {exc}")
        return error_json_response(
            "Could not build collection links", status.HTTP_500_INTERNAL_SERVER_ERROR, code="link_error"
        )
