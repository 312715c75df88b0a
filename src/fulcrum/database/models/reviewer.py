"""Reviewer model for Fulcrum."""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column

from fulcrum.database.models.base import Base, TimestampMixin


class Reviewer(TimestampMixin, Base):
    """A member who can be assigned reviews.

    Attributes:
        id: UUID primary key (from TimestampMixin).
        email: Unique login and notification address.
        name: Display name.
        active: Inactive reviewers are never returned by the directory.
        is_admin: Grants administrative access.
        assigned_stage_ids: Stage ids this reviewer may be auto-assigned to.
        only_first_year_phone_screen: Restrict developer phone screens to
            first-year applicants.
        only_first_year_technical: Restrict developer technical interviews
            to first-year applicants.
        is_doing_interview_alone: Solo interviewer; their load counts double.
    """

    __tablename__ = "reviewers"

    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assigned_stage_ids: Mapped[list[int]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )
    only_first_year_phone_screen: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    only_first_year_technical: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    is_doing_interview_alone: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
