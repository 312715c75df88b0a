"""Database layer for Fulcrum.

This module handles database connections, session management, the ORM
models and the stores built on top of them.

Public API:
    get_engine: Create an AsyncEngine from DatabaseConfig.
    get_session_factory: Create an async_sessionmaker from an engine.
    Base: SQLAlchemy declarative base for all models.
"""

from fulcrum.database.connection import SessionFactory, get_engine, get_session_factory
from fulcrum.database.models import (
    Application,
    Base,
    Progress,
    ProgressState,
    Review,
    Reviewer,
    TimestampMixin,
)
from fulcrum.database.queries import (
    ApplicationStore,
    ProgressStore,
    ReviewerDirectory,
    ReviewStore,
)

__all__ = [
    "SessionFactory",
    "get_engine",
    "get_session_factory",
    "Base",
    "TimestampMixin",
    "Application",
    "Progress",
    "ProgressState",
    "Review",
    "Reviewer",
    "ApplicationStore",
    "ProgressStore",
    "ReviewStore",
    "ReviewerDirectory",
]
