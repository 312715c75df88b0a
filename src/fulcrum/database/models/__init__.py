"""SQLAlchemy ORM models for Fulcrum.

This module re-exports all models and enums for convenient importing:

    >>> from fulcrum.database.models import Application, Review, Progress
"""

from fulcrum.database.models.application import Application
from fulcrum.database.models.base import Base, TimestampMixin
from fulcrum.database.models.progress import Progress, ProgressState
from fulcrum.database.models.review import Review
from fulcrum.database.models.reviewer import Reviewer

__all__ = [
    "Base",
    "TimestampMixin",
    "Application",
    "Progress",
    "ProgressState",
    "Review",
    "Reviewer",
]
