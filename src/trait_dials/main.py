"""
Trait Dials Service Entry Point

This module defines the FastAPI application instance, registers all routers,
configures logging and global exception handling, and provides a
test-friendly application factory.

Design Goals
------------
- Deterministic startup
- Centralized router registration
- Every response, including failures, is a JSON object
- Test-friendly via create_app()
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .core.errors import (
    RecommendationError,
    http_exception_handler,
    recommendation_error_handler,
    unhandled_exception_handler,
)
from .core.logging_config import configure_logging
from .api import health_routes, recommend_routes


logger = logging.getLogger("dials.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("Starting trait-dials", extra={"model": settings.openai_model})
    if not settings.has_api_key:
        # Requests will be answered with 500 until a key is provided
        logger.warning("OPENAI_API_KEY is not configured")
    yield
    logger.info("Shutting down trait-dials")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    configure_logging(get_settings().log_level)

    app = FastAPI(
        title="trait-dials",
        version="1.0.0",
        lifespan=lifespan,
    )

    # --------------------------------------------------------------
    # Global Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(RecommendationError, recommendation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(recommend_routes.router)

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn)
# ---------------------------------------------------------------------

app = create_app()
