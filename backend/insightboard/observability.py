"""Logging setup and Logfire cloud instrumentation."""

import logging

import logfire
from fastapi import FastAPI

from insightboard import __version__
from insightboard.config import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def initialize_logfire(settings: Settings, app: FastAPI | None = None) -> bool:
    """
    Initialize Logfire with FastAPI and PyMongo instrumentation.

    Must be called once at application startup, before requests are served.

    Instruments:
    - FastAPI request handling (when an app is given)
    - PyMongo commands issued through Motor
    - Python logging (bridges to Logfire)

    Args:
        settings: Application settings containing Logfire token
        app: FastAPI application to instrument

    Returns:
        True if Logfire was configured, False if it is disabled or failed.
    """
    if not settings.logfire_token:
        logger.info("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="insightboard",
            service_version=__version__,
            environment=settings.environment,
        )

        if app is not None:
            logfire.instrument_fastapi(app)

        logfire.instrument_pymongo()

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire cloud tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        # Continue running - observability is optional
        return False
