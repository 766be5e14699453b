import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


class StorageError(Exception):
    """Raised when the catalog store cannot be reached or a query fails."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.message = message
        self.details = details


def not_connected_error() -> StorageError:
    return StorageError("Database not connected", "Check the database configuration variables.")


def build_engine(url: str):
    """
    Create the SQLAlchemy engine with a bounded connection pool.

    Ten connections at most; further checkouts wait in the pool queue.
    Returns None when the URL is missing or cannot be parsed.
    """
    if not url:
        logger.error("Database connection failed! No DATABASE_URL or DB_HOST configured.")
        return None

    try:
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite":
            return create_engine(parsed, connect_args={"check_same_thread": False})
        return create_engine(
            parsed,
            pool_size=10,
            max_overflow=0,
            pool_pre_ping=True,
        )
    except (ArgumentError, ImportError, ValueError) as e:
        logger.error(f"Database connection failed! Reason: {e}")
        return None


engine = build_engine(settings.database_url())

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine) if engine else None

# Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency to get database session.
    Yields a database session and closes it after use.
    """
    if SessionLocal is None:
        raise not_connected_error()

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_optional_db():
    """Like get_db, but yields None instead of failing when not connected."""
    if SessionLocal is None:
        yield None
        return
    yield from get_db()
