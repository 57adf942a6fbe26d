import logging
import sqlite3
from typing import Generator
from sqlalchemy import create_engine, event, text, Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from .config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_options(database_url: str) -> dict:
    """Pool options for the configured backend"""
    if database_url.startswith("sqlite"):
        # One SQLite connection may be used from FastAPI's worker threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }


# Create SQLAlchemy engine with proper configuration
engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url)
)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base class for models
Base = declarative_base()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


@event.listens_for(Engine, "connect")
def receive_connect(dbapi_connection, connection_record):
    """Event listener for database connections"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        # SQLite's built-in lower() only folds ASCII, which breaks ilike
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
    logger.debug("Database connection established")


def get_db() -> Generator[Session, None, None]:
    """
    Database dependency for FastAPI

    Yields:
        Session: Database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        logger.debug("Rolling back database session")
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> bool:
    """
    Initialize database tables

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        # Import all models here to ensure they are registered
        from ..models import task, user  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        return False


def check_db_connection() -> bool:
    """
    Check database connectivity

    Returns:
        bool: True if connected, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
