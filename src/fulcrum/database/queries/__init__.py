"""Database stores for Fulcrum.

Each store wraps a session factory and exposes the queries one component
needs:
- ReviewStore: review creation, lookup, load counts and saves
- ApplicationStore: application lookup and the reviewer block-list
- ProgressStore: per-pipeline progress records
- ReviewerDirectory: active reviewers by stage and email
"""

from fulcrum.database.queries.application import ApplicationStore
from fulcrum.database.queries.progress import ProgressStore
from fulcrum.database.queries.review import ReviewStore
from fulcrum.database.queries.reviewer import ReviewerDirectory

__all__ = [
    "ApplicationStore",
    "ProgressStore",
    "ReviewStore",
    "ReviewerDirectory",
]
