"""Collaborator interfaces used by the review and progression services.

The SQLAlchemy stores in :mod:`fulcrum.database.queries` and the transports
in :mod:`fulcrum.notifications` implement these protocols. Services depend
only on the protocols, so tests can pass ``AsyncMock`` doubles or in-memory
fakes instead.
"""

from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from fulcrum.catalog.models import PipelineDefinition, StageDefinition
from fulcrum.database.models import Application, Progress, Review, Reviewer


class StageLookup(Protocol):
    def get_by_id(self, stage_id: int) -> StageDefinition | None: ...

    def get_by_identifier(self, identifier: str) -> StageDefinition | None: ...

    def get_by_pipeline(self, pipeline_id: str) -> list[StageDefinition]: ...

    def get_by_pipeline_and_index(
        self, pipeline_id: str, index: int
    ) -> StageDefinition | None: ...

    def get_pipeline(self, pipeline_id: str) -> PipelineDefinition | None: ...


class ReviewRepository(Protocol):
    async def create(self, stage_id: int, application_id: UUID) -> Review: ...

    async def get_by_id(self, review_id: UUID) -> Review | None: ...

    async def find_by_stage_and_application(
        self, stage_id: int, application_id: UUID
    ) -> list[Review]: ...

    async def count_by_reviewer_and_stage(self, reviewer_email: str, stage_id: int) -> int: ...

    async def find_one(self, **filters: Any) -> Review | None: ...

    async def find_by_reviewer(self, reviewer_email: str) -> list[Review]: ...

    async def save(self, review: Review) -> Review: ...


class ApplicationRepository(Protocol):
    async def get_by_id(self, application_id: UUID) -> Application | None: ...

    async def find_by_email_and_year(
        self, email: str, year_applied: int
    ) -> Application | None: ...

    async def create(self, **fields: Any) -> Application: ...

    async def add_blocklisted_reviewer(
        self, application_id: UUID, reviewer_email: str
    ) -> Application | None: ...


class ProgressRepository(Protocol):
    async def create(self, application_id: UUID, pipeline_id: str) -> Progress: ...

    async def get_by_pipeline_and_application(
        self, pipeline_id: str, application_id: UUID
    ) -> Progress | None: ...

    async def get_by_id(self, progress_id: UUID) -> Progress | None: ...

    async def save(self, progress: Progress) -> Progress: ...


class ReviewerLookup(Protocol):
    async def get_by_stage(self, stage_id: int) -> list[Reviewer]: ...

    async def get_by_email(self, email: str) -> Reviewer | None: ...


class NotificationPort(Protocol):
    """Outbound email.

    Implementations return False (or raise) when the message could not be
    handed off; callers decide whether that is fatal.
    """

    async def send(self, recipient: str, subject: str, body: str) -> bool: ...
