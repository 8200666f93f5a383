"""
Services module.

Query building and response shaping for the insight endpoints.
"""

from insightboard.services.exceptions import QueryFailure
from insightboard.services.insight_service import InsightQueryService

__all__ = ["InsightQueryService", "QueryFailure"]
