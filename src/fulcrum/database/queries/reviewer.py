"""Reviewer lookup for Fulcrum.

Only active reviewers are visible through the directory.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import select

from fulcrum.database.connection import SessionFactory
from fulcrum.database.models.reviewer import Reviewer

logger = structlog.get_logger(__name__)


class ReviewerDirectory:
    """Query reviewers by stage eligibility and email.

    Attributes:
        session_factory: Callable that produces async database sessions.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory
        self._logger = logger.bind(component="ReviewerDirectory")

    async def create(self, **fields: Any) -> Reviewer:
        """Insert a reviewer built from column values."""
        reviewer = Reviewer(**fields)
        async with self.session_factory() as session:
            session.add(reviewer)
            await session.commit()

        self._logger.info("reviewer_created", reviewer_email=reviewer.email)
        return reviewer

    async def get_by_email(self, email: str) -> Reviewer | None:
        stmt = select(Reviewer).where(Reviewer.email == email, Reviewer.active.is_(True))
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def get_by_stage(self, stage_id: int) -> list[Reviewer]:
        """Active reviewers eligible for a stage, ordered by email.

        Stage eligibility lives in a JSON list, so it is filtered here rather
        than in SQL to stay portable across database backends.
        """
        stmt = select(Reviewer).where(Reviewer.active.is_(True)).order_by(Reviewer.email.asc())
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            reviewers = result.scalars().all()
        return [r for r in reviewers if stage_id in (r.assigned_stage_ids or [])]
