"""
Main application module.

This module assembles a FastAPI application around DAO-backed collection
controllers: request logging, error handlers and the controllers' routes.
"""

import logging
from typing import Iterable, Optional, Sequence, Type

from fastapi import FastAPI, params

from restdao.middleware.error_handler import add_error_handlers
from restdao.middleware.request_logger import add_request_logging
from restdao.models.base import Resource
from restdao.repositories.base import DatabaseDAO
from restdao.routes.collection import CollectionController
from restdao.utils.config import Settings, get_settings
from restdao.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    controllers: Iterable[CollectionController],
    settings: Optional[Settings] = None,
    title: str = "restdao",
    configure_logging: bool = False,
) -> FastAPI:
    """
    Create the FastAPI application serving the given collections.

    The DAOs of the controllers are closed when the application shuts down.

    Args:
        controllers: Collection controllers to register
        settings: Application settings, defaults to the cached settings
        title: Title of the generated API documentation
        configure_logging: Install the root log handlers from the settings

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()
    controllers = list(controllers)
    if configure_logging:
        setup_logging(settings)

    app = FastAPI(title=title, debug=settings.DEBUG)

    add_request_logging(app)
    add_error_handlers(app)

    for controller in controllers:
        app.include_router(controller.router)
        logger.info(f"Registered collection {controller.path} ({','.join(controller.methods())})")

    @app.on_event("shutdown")
    def close_daos():
        """Release the prepared queries of every collection."""
        logger.info("Shutting down application...")
        for controller in controllers:
            controller.dao.close()

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


def collection_controller(
    base_path: str,
    dao: DatabaseDAO,
    entity_model: Type[Resource],
    settings: Optional[Settings] = None,
    dependencies: Optional[Sequence[params.Depends]] = None,
) -> CollectionController:
    """Create a collection controller configured from the settings."""
    settings = settings or get_settings()
    return CollectionController(
        base_path,
        dao,
        entity_model,
        allowed_origin=settings.ALLOWED_ORIGIN,
        default_limit=settings.DEFAULT_LIMIT,
        dependencies=dependencies,
    )
