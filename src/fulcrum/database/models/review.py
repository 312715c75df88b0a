"""Review model for Fulcrum.

One review is one reviewer's evaluation of one application at one stage.
Reviews are never deleted; reassignment clears and replaces the reviewer.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import JSON, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fulcrum.database.models.base import Base, TimestampMixin


class Review(TimestampMixin, Base):
    """A review slot for an application at a stage.

    Attributes:
        id: UUID primary key (from TimestampMixin).
        stage_id: Numeric id of the stage in the stage catalog.
        application_id: Foreign key to the reviewed application.
        reviewer_email: Assigned reviewer, None while unassigned.
        fields: Field name to entered value (number, string or boolean).
        interview_id: Linked live interview session, if any.
    """

    __tablename__ = "reviews"
    __table_args__ = (
        Index("idx_reviews_stage_application", "stage_id", "application_id"),
        Index("idx_reviews_reviewer_stage", "reviewer_email", "stage_id"),
    )

    stage_id: Mapped[int] = mapped_column(Integer, nullable=False)
    application_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("applications.id"),
        nullable=False,
    )
    reviewer_email: Mapped[str | None] = mapped_column(Text, nullable=True)
    fields: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    interview_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
