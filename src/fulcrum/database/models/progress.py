"""Progress model for Fulcrum.

Tracks where an application stands within one pipeline. A new progress
starts before the first stage (``stage_index == -1``) and is advanced into
stage 0 immediately after creation.
"""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import Enum, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fulcrum.database.models.base import Base, TimestampMixin


class ProgressState(str, enum.Enum):
    """Lifecycle of an application within a pipeline.

    States:
        pending: Moving through the pipeline's stages.
        accepted: Advanced past the final stage (terminal).
        rejected: Rejected at some stage (terminal).
    """

    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class Progress(TimestampMixin, Base):
    """An application's position in one pipeline.

    Attributes:
        id: UUID primary key (from TimestampMixin).
        application_id: Foreign key to the application.
        pipeline_id: Identifier of the pipeline.
        stage_index: Index of the current stage, -1 before the first.
        state: Current lifecycle state.
    """

    __tablename__ = "progresses"
    __table_args__ = (
        UniqueConstraint(
            "application_id", "pipeline_id", name="uq_progresses_application_pipeline"
        ),
    )

    application_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("applications.id"),
        nullable=False,
    )
    pipeline_id: Mapped[str] = mapped_column(Text, nullable=False)
    stage_index: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
    state: Mapped[ProgressState] = mapped_column(
        Enum(ProgressState, name="progress_state"),
        default=ProgressState.pending,
        nullable=False,
    )
