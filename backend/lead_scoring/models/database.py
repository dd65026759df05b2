"""
Database configuration and base models
"""
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.exc import OperationalError, DBAPIError

from lead_scoring.core.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

# Convert postgresql:// to postgresql+psycopg:// for psycopg3 compatibility
if DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+psycopg://", 1)


def build_engine(url: str, echo: bool = False):
    """
    Create a SQLAlchemy engine with pool settings suited to the backend.

    SQLite gets a thread-tolerant connection since store calls run in
    worker threads.
    """
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False}
        )

    return create_engine(
        url,
        echo=echo,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,  # Test connection before use (prevents stale connection errors)
        pool_recycle=3600,
        pool_timeout=30,
    )


engine = build_engine(DATABASE_URL, echo=settings.DATABASE_ECHO)

# Create sessionmaker
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()

# Import all models to ensure they are registered with SQLAlchemy
from lead_scoring.models.campaign import Campaign  # noqa: E402,F401
from lead_scoring.models.lead import Lead  # noqa: E402,F401
from lead_scoring.models.activity import Activity  # noqa: E402,F401


def check_database_health() -> dict:
    """
    Check database connectivity.

    Returns:
        dict: {"status": "healthy"} or {"status": "unhealthy", "error": ...}
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy"}
    except (OperationalError, DBAPIError) as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unhealthy",
            "error": str(e),
            "error_type": type(e).__name__
        }
    finally:
        db.close()
