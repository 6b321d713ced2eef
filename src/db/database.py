"""
Database engine and session management for the radio catalog.

This module provides:
- Engine creation from a SQLAlchemy URL (SQLite or PostgreSQL)
- Session-per-operation pattern through the session_scope() context manager
- SQLite optimization settings (WAL mode, foreign keys, busy timeout)

Nothing is created at import time: each job builds one engine from its
Settings and hands the session factory to CatalogStore.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator
from urllib.parse import urlparse

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError, OperationalError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool, StaticPool

from src.errors import ConfigurationError
from src.logger import log_function
from .models import Base


db_logger = logging.getLogger("database")

SUPPORTED_SCHEMES = ("sqlite", "postgresql")


def validate_database_url(url: str) -> tuple[bool, str]:
    """Validate the database URL scheme and, for SQLite files, the parent directory."""
    if not url:
        return False, "Database URL is empty"
    try:
        parsed = urlparse(url)
    except ValueError as e:
        return False, f"Invalid database URL format: {e}"

    scheme = parsed.scheme.split("+")[0]
    if scheme not in SUPPORTED_SCHEMES:
        return False, f"Unsupported database scheme: {parsed.scheme}"

    if scheme == "sqlite":
        db_path = parsed.path.lstrip("/")
        if not db_path or db_path == ":memory:":
            return True, ":memory:"
        parent_dir = Path(db_path).parent
        if not parent_dir.exists():
            return False, f"Database directory does not exist: {parent_dir}"
        return True, db_path

    return True, parsed.hostname or url


def optimize_sqlite_connection(dbapi_connection, connection_record):
    """Apply SQLite-specific settings when a connection is created."""
    cursor = dbapi_connection.cursor()

    # WAL lets the web API read while a batch job writes
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    # Needed for ON DELETE CASCADE on clip_tags and votes
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA synchronous=NORMAL")

    cursor.close()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the catalog database.

    Args:
        database_url: SQLAlchemy URL, e.g. "sqlite:///data/radio.db"
        echo: Log emitted SQL statements

    Returns:
        Configured Engine

    Raises:
        ConfigurationError: If the URL is unsupported or points to a missing directory
    """
    is_valid, db_info = validate_database_url(database_url)
    if not is_valid:
        db_logger.error(f"Database configuration error: {db_info}")
        raise ConfigurationError(f"Database configuration error: {db_info}")

    if database_url.startswith("sqlite"):
        # In-memory databases must share a single connection
        poolclass = StaticPool if db_info == ":memory:" else NullPool
        engine = create_engine(
            database_url,
            poolclass=poolclass,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        event.listen(engine, "connect", optimize_sqlite_connection)
    else:
        engine = create_engine(database_url, echo=echo, pool_pre_ping=True)

    db_logger.info(f"Database engine created for {db_info}")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Return the session factory bound to engine."""
    return sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )


@contextmanager
def session_scope(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Context manager for database sessions (session-per-operation pattern).

    Commits nothing on its own: callers commit explicitly. Any exception rolls
    the session back and is re-raised.

    Usage:
        with session_scope(factory) as session:
            session.add(Category(name="Overtake"))
            session.commit()
    """
    session = session_factory()
    try:
        yield session

    except OperationalError as e:
        db_logger.error(f"Database operational error: {e}")
        session.rollback()

        error_msg = str(e.orig) if hasattr(e, "orig") else str(e)
        if "no such table" in error_msg.lower():
            raise OperationalError(
                "Database table does not exist. Run `python -m src.maintenance init-db` first.",
                None,
                e.orig,
            ) from e
        raise

    except SQLAlchemyError as e:
        db_logger.error(f"Database error: {e}")
        session.rollback()
        raise

    except Exception:
        session.rollback()
        raise

    finally:
        session.close()


@log_function(logger_name="database", log_execution_time=True)
def check_database_connection(engine: Engine) -> bool:
    """Return True if a trivial query succeeds on engine."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        db_logger.error(f"Database connection test failed: {e}")
        return False


@log_function(logger_name="database", log_execution_time=True)
def init_database(engine: Engine) -> None:
    """
    Create all catalog tables that do not exist yet.

    Raises:
        SQLAlchemyError: If table creation fails
    """
    Base.metadata.create_all(bind=engine)
    db_logger.info("Database tables created successfully")
