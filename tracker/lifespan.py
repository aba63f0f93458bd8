"""
Application lifespan management for startup and shutdown events
"""
import logging
from contextlib import asynccontextmanager

from .core.config import settings, validate_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    """Validate config and open the table store before serving."""
    logger.info("Starting device tracker (env=%s)...", settings.ENV)
    try:
        validate_config()

        # Builds the store on first call; for the SQL backend this creates the schema
        from .dependencies import get_table_store
        if get_table_store not in app.dependency_overrides:
            get_table_store()
            logger.info("Table store ready (backend=%s)", settings.STORAGE_BACKEND)

        logger.info("Application startup completed successfully")
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    yield

    logger.info("Shutting down device tracker...")
    if settings.STORAGE_BACKEND == "sql":
        from .db import dispose_engine
        dispose_engine()
    logger.info("Application shutdown completed successfully")


__all__ = ["lifespan"]
