"""
FastAPI dependencies for the insight routes.
"""

from fastapi import Request

from insightboard.config import Settings
from insightboard.services import InsightQueryService


def get_service(request: Request) -> InsightQueryService:
    """
    FastAPI dependency that provides the query service built at startup.

    Usage:
        @router.get("/stats")
        async def stats(service: InsightQueryService = Depends(get_service)):
            return await service.collection_counts()
    """
    service = request.app.state.service
    if service is None:
        raise RuntimeError("Query service not initialized. Is the app lifespan running?")
    return service


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency that provides the settings the app was built with."""
    return request.app.state.settings
