"""Review persistence for Fulcrum.

Every method opens its own session and commits before returning, so an
assignment written by one call is visible to the load counts read by the
next.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import func, select

from fulcrum.database.connection import SessionFactory
from fulcrum.database.models.review import Review

logger = structlog.get_logger(__name__)


class ReviewStore:
    """Create, query and save Review records.

    Attributes:
        session_factory: Callable that produces async database sessions.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory
        self._logger = logger.bind(component="ReviewStore")

    async def create(self, stage_id: int, application_id: UUID) -> Review:
        """Insert an unassigned, empty review.

        Args:
            stage_id: Stage the review belongs to.
            application_id: Application under review.

        Returns:
            The newly created Review.
        """
        review = Review(
            stage_id=stage_id,
            application_id=application_id,
            reviewer_email=None,
            fields={},
        )
        async with self.session_factory() as session:
            session.add(review)
            await session.commit()

        self._logger.info(
            "review_created",
            review_id=str(review.id),
            stage_id=stage_id,
            application_id=str(application_id),
        )
        return review

    async def get_by_id(self, review_id: UUID) -> Review | None:
        async with self.session_factory() as session:
            return await session.get(Review, review_id)

    async def find_by_stage_and_application(
        self, stage_id: int, application_id: UUID
    ) -> list[Review]:
        """All reviews of one application at one stage, oldest first."""
        stmt = (
            select(Review)
            .where(Review.stage_id == stage_id, Review.application_id == application_id)
            .order_by(Review.created_at.asc())
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def find_by_application(self, application_id: UUID) -> list[Review]:
        stmt = (
            select(Review)
            .where(Review.application_id == application_id)
            .order_by(Review.created_at.asc())
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def find_by_reviewer(self, reviewer_email: str) -> list[Review]:
        """All reviews assigned to a reviewer, oldest first."""
        stmt = (
            select(Review)
            .where(Review.reviewer_email == reviewer_email)
            .order_by(Review.created_at.asc())
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count_by_reviewer_and_stage(self, reviewer_email: str, stage_id: int) -> int:
        """Number of reviews at a stage assigned to a reviewer."""
        stmt = select(func.count(Review.id)).where(
            Review.reviewer_email == reviewer_email,
            Review.stage_id == stage_id,
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def find_one(self, **filters: Any) -> Review | None:
        """First review matching equality filters on Review columns.

        Example:
            >>> await store.find_one(application_id=app_id, reviewer_email="a@b.c")
        """
        stmt = select(Review).filter_by(**filters).order_by(Review.created_at.asc()).limit(1)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def save(self, review: Review) -> Review:
        """Persist all attribute changes of a review.

        Returns:
            The persisted Review. Callers should continue with the returned
            instance rather than the argument.
        """
        async with self.session_factory() as session:
            merged = await session.merge(review)
            await session.commit()

        self._logger.debug(
            "review_saved",
            review_id=str(merged.id),
            reviewer_email=merged.reviewer_email,
        )
        return merged
