"""Progress persistence for Fulcrum."""

from __future__ import annotations

from uuid import UUID

import structlog
from sqlalchemy import select

from fulcrum.database.connection import SessionFactory
from fulcrum.database.models.progress import Progress, ProgressState

logger = structlog.get_logger(__name__)


class ProgressStore:
    """Create, query and save Progress records.

    Attributes:
        session_factory: Callable that produces async database sessions.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory
        self._logger = logger.bind(component="ProgressStore")

    async def create(self, application_id: UUID, pipeline_id: str) -> Progress:
        """Insert a pending progress positioned before the first stage."""
        progress = Progress(
            application_id=application_id,
            pipeline_id=pipeline_id,
            stage_index=-1,
            state=ProgressState.pending,
        )
        async with self.session_factory() as session:
            session.add(progress)
            await session.commit()

        self._logger.info(
            "progress_created",
            progress_id=str(progress.id),
            application_id=str(application_id),
            pipeline_id=pipeline_id,
        )
        return progress

    async def get_by_id(self, progress_id: UUID) -> Progress | None:
        async with self.session_factory() as session:
            return await session.get(Progress, progress_id)

    async def get_by_pipeline_and_application(
        self, pipeline_id: str, application_id: UUID
    ) -> Progress | None:
        stmt = select(Progress).where(
            Progress.pipeline_id == pipeline_id,
            Progress.application_id == application_id,
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def find_by_application(self, application_id: UUID) -> list[Progress]:
        stmt = (
            select(Progress)
            .where(Progress.application_id == application_id)
            .order_by(Progress.created_at.asc())
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def save(self, progress: Progress) -> Progress:
        """Persist all attribute changes of a progress and return it."""
        async with self.session_factory() as session:
            merged = await session.merge(progress)
            await session.commit()
        return merged
