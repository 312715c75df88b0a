"""Application persistence for Fulcrum, including the reviewer block-list."""

from __future__ import annotations

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import select

from fulcrum.database.connection import SessionFactory
from fulcrum.database.models.application import Application

logger = structlog.get_logger(__name__)


class ApplicationStore:
    """Create and query Application records.

    Attributes:
        session_factory: Callable that produces async database sessions.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory
        self._logger = logger.bind(component="ApplicationStore")

    async def create(self, **fields: Any) -> Application:
        """Insert an application built from column values."""
        application = Application(**fields)
        async with self.session_factory() as session:
            session.add(application)
            await session.commit()

        self._logger.info(
            "application_created",
            application_id=str(application.id),
            year_applied=application.year_applied,
        )
        return application

    async def get_by_id(self, application_id: UUID) -> Application | None:
        async with self.session_factory() as session:
            return await session.get(Application, application_id)

    async def find_by_email_and_year(self, email: str, year_applied: int) -> Application | None:
        stmt = select(Application).where(
            Application.email == email,
            Application.year_applied == year_applied,
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def add_blocklisted_reviewer(
        self, application_id: UUID, reviewer_email: str
    ) -> Application | None:
        """Append a reviewer to an application's block-list.

        The update is read-modify-write; concurrent appends to the same
        application race and the last write wins.

        Returns:
            The updated Application, or None if it does not exist.
        """
        async with self.session_factory() as session:
            application = await session.get(Application, application_id)
            if application is None:
                return None

            current = list(application.blocklisted_reviewer_emails or [])
            if reviewer_email not in current:
                # Assign a new list so the JSON column is flagged dirty
                application.blocklisted_reviewer_emails = [*current, reviewer_email]
                await session.commit()

        self._logger.info(
            "reviewer_blocklisted",
            application_id=str(application_id),
            reviewer_email=reviewer_email,
        )
        return application
