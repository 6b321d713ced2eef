"""
Database package for the team radio catalog.

Structure:
- models.py: SQLAlchemy ORM models (Driver, Race, Clip, Category, ClipTag, Vote)
- database.py: Engine creation, session factory and session_scope()
- store.py: CatalogStore, the named operations used by the pipelines

Usage:
    from src.db import create_db_engine, create_session_factory, CatalogStore

    engine = create_db_engine(settings.database_url)
    store = CatalogStore(create_session_factory(engine))
"""

from .models import Base, Category, Clip, ClipTag, Driver, Race, TimestampMixin, Vote
from .database import (
    check_database_connection,
    create_db_engine,
    create_session_factory,
    init_database,
    session_scope,
    validate_database_url,
)
from .store import (
    CatalogStore,
    CategoryRecord,
    ClipQuery,
    ClipRecord,
    TranscriptFilter,
    create_store,
)

__all__ = [
    # Models
    "Base",
    "Category",
    "Clip",
    "ClipTag",
    "Driver",
    "Race",
    "TimestampMixin",
    "Vote",
    # Database utilities
    "check_database_connection",
    "create_db_engine",
    "create_session_factory",
    "init_database",
    "session_scope",
    "validate_database_url",
    # Store
    "CatalogStore",
    "CategoryRecord",
    "ClipQuery",
    "ClipRecord",
    "TranscriptFilter",
    "create_store",
]
