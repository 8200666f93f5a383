"""
MongoDB connection management.

This module provides:
- MongoDB client creation via Motor (async driver)
- Health check utilities
- Credential-free connection info for logs
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from insightboard.config import Settings

logger = logging.getLogger(__name__)


def create_client(settings: Settings) -> AsyncIOMotorClient:
    """
    Create the MongoDB client shared by all requests.

    Motor connects lazily; call check_db_connection() to verify reachability.
    """
    return AsyncIOMotorClient(
        settings.database,
        serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
    )


def get_collection(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorCollection:
    """
    Get the insight collection from the configured database.
    """
    return client[settings.mongodb_database][settings.collection_name]


async def check_db_connection(client: AsyncIOMotorClient | None) -> bool:
    """
    Check if MongoDB connection is healthy.
    """
    if client is None:
        return False

    try:
        await client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False


def get_db_info(settings: Settings) -> dict:
    """
    Get database connection information for logging.
    """
    return {
        "url": sanitize_mongodb_url(settings.database),
        "database": settings.mongodb_database,
        "collection": settings.collection_name,
        "environment": settings.environment,
    }


def sanitize_mongodb_url(url: str) -> str:
    """
    Hide password in MongoDB URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    # Handle mongodb+srv:// or mongodb://
    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{protocol}://{username}:***@{host}"
    return url
