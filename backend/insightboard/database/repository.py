"""
Insight repository.

Read-only access to the insight collection. The query service depends on
this class rather than on a driver handle, so tests can substitute a fake
repository with the same three coroutines.

Methods:
- aggregate(pipeline) -> List[Dict]: Run an aggregation pipeline
- find_many(filter, skip, limit) -> List[Dict]: Find documents
- count(filter) -> int: Count matching documents
"""

import logging
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorCollection

logger = logging.getLogger(__name__)


class InsightRepository:
    """Query interface over one MongoDB collection of insight records."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Run an aggregation pipeline and return every result document."""
        logger.debug(f"aggregate on {self.collection.name}: {pipeline}")
        cursor = self.collection.aggregate(pipeline)
        return await cursor.to_list(length=None)

    async def find_many(
        self,
        filter: Dict[str, Any],
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        """Find documents matching a filter. A limit of 0 means no limit."""
        logger.debug(f"find on {self.collection.name}: {filter} skip={skip} limit={limit}")
        cursor = self.collection.find(filter).skip(skip).limit(limit)
        return await cursor.to_list(length=None)

    async def count(self, filter: Dict[str, Any]) -> int:
        """Count documents matching a filter."""
        return await self.collection.count_documents(filter)
