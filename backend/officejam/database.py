"""Database configuration and session management"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
import logging

from officejam.config import settings

logger = logging.getLogger(__name__)


def make_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine, relaxing SQLite's same-thread check."""
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},
        echo=False
    )


# Create SQLAlchemy engine
engine = make_engine(settings.database_url)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def init_db(bind: Engine = None):
    """Create any missing tables."""
    # Import models so they register on Base.metadata
    import officejam.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ready")
