"""API routes module."""

from insightboard.api.routes.insights import router as insights_router

__all__ = ["insights_router"]
