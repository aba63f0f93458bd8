"""
Database configuration with lazy initialization.

The engine is only created when the SQL table store is first used, so the
DynamoDB and in-memory backends never touch SQLAlchemy's pool.
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import QueuePool, StaticPool

from .core.config import settings

logger = logging.getLogger(__name__)

# Global engine instance (lazily initialized)
_engine = None
_SessionLocal = None

Base = declarative_base()


def make_engine(database_url: str):
    """Create an engine with pooling suited to the database dialect."""
    if database_url.startswith("sqlite"):
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty database
            return create_engine(
                database_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        return create_engine(
            database_url,
            poolclass=QueuePool,
            pool_size=5,
            max_overflow=0,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=20,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def get_engine():
    """Get or create the process-wide engine."""
    global _engine
    if _engine is None:
        # Only scheme and first few chars, never credentials
        db_url_safe = settings.DATABASE_URL[:30] + "..." if len(settings.DATABASE_URL) > 30 else settings.DATABASE_URL
        logger.info("Creating database engine for: %s", db_url_safe)
        _engine = make_engine(settings.DATABASE_URL)
    return _engine


def get_session_local():
    """Get or create the SessionLocal class."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def init_db(engine=None):
    """Create the record table if it does not exist yet."""
    from . import models  # noqa: F401  registers TableRecord on Base

    Base.metadata.create_all(bind=engine or get_engine())


def dispose_engine():
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
        logger.info("Database connections closed")
    _engine = None
    _SessionLocal = None
