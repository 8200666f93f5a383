"""
FastAPI application factory for Insightboard.

This module:
- Connects to MongoDB during the lifespan and fails startup if it cannot
- Configures CORS for frontend integration
- Sets up logging and Logfire observability
- Maps every error to the {status: 0, message} body
- Provides health check endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from insightboard import __version__
from insightboard.api.routes import insights_router
from insightboard.config import Settings, get_settings
from insightboard.database import (
    InsightRepository,
    check_db_connection,
    create_client,
    get_collection,
    get_db_info,
)
from insightboard.models import ErrorResponse
from insightboard.observability import configure_logging, initialize_logfire
from insightboard.services import InsightQueryService, QueryFailure

logger = logging.getLogger(__name__)


class StoreUnavailableError(RuntimeError):
    """The store did not answer a ping at startup."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Opens the shared MongoDB client unless a repository was injected.
    """
    settings: Settings = app.state.settings
    logger.info(f"Starting Insightboard API Server (environment={settings.environment})")

    client = None
    if app.state.service is None:
        client = create_client(settings)
        db_info = get_db_info(settings)

        if not await check_db_connection(client):
            logger.error(
                f"MongoDB connection failed: url={db_info['url']} database={db_info['database']}"
            )
            client.close()
            raise StoreUnavailableError(f"Could not connect to MongoDB at {db_info['url']}")

        logger.info(
            f"MongoDB connection successful: url={db_info['url']} "
            f"database={db_info['database']} collection={db_info['collection']}"
        )
        repository = InsightRepository(get_collection(client, settings))
        app.state.service = InsightQueryService(
            repository, categories_limit=settings.categories_limit
        )
    app.state.client = client

    logger.info("Insightboard API Server startup complete")

    yield

    # Shutdown
    logger.info("Shutting down Insightboard API Server")
    if client is not None:
        client.close()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


async def query_failure_handler(request: Request, exc: QueryFailure) -> JSONResponse:
    return _error(500, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return _error(422, message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


def create_app(
    settings: Settings | None = None,
    repository: InsightRepository | None = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Settings to use, defaults to the environment
        repository: Store access to use instead of connecting to MongoDB
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Insightboard API",
        description="Read-only aggregate statistics over insight records",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.client = None
    app.state.service = (
        InsightQueryService(repository, categories_limit=settings.categories_limit)
        if repository is not None
        else None
    )

    initialize_logfire(settings, app)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.add_exception_handler(QueryFailure, query_failure_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    # ========================================================================
    # Health Check Endpoints
    # ========================================================================

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request) -> Dict[str, str]:
        """
        Health check endpoint for load balancers and monitoring.

        Returns:
            dict: Health status of the application and database
        """
        db_connected = await check_db_connection(request.app.state.client)

        return {
            "status": "healthy" if db_connected else "degraded",
            "service": "insightboard-api",
            "version": __version__,
            "database": "connected" if db_connected else "disconnected",
            "environment": settings.environment,
        }

    @app.get("/", tags=["Root"])
    async def root() -> Dict[str, str]:
        """
        Root endpoint - API information.

        Returns:
            dict: Basic API information
        """
        return {
            "name": "Insightboard API",
            "version": __version__,
            "description": "Read-only aggregate statistics over insight records",
            "docs": "/docs",
            "health": "/health",
        }

    app.include_router(insights_router)

    return app
