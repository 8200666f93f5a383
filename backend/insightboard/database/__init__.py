"""
Database module initialization.
Exports database components for use throughout the application.
"""

from insightboard.database.connection import (
    check_db_connection,
    create_client,
    get_collection,
    get_db_info,
    sanitize_mongodb_url,
)
from insightboard.database.repository import InsightRepository

__all__ = [
    # Connection management
    "create_client",
    "get_collection",
    # Repository
    "InsightRepository",
    # Utilities
    "check_db_connection",
    "get_db_info",
    "sanitize_mongodb_url",
]
