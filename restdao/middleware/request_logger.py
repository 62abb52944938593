"""
Request logging middleware.

Logs one line for every request received, before it is dispatched.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def add_request_logging(app: FastAPI, request_logger: Optional[logging.Logger] = None) -> None:
    """
    Log every request received by the application.

    Args:
        app: FastAPI application instance
        request_logger: Logger to write to, defaults to this module's logger
    """
    log = request_logger or logger

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        log.info(f"Request received: {request.method} {request.url}")
        return await call_next(request)
