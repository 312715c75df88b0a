"""Application model for Fulcrum.

An application is one applicant's submission for a recruiting year. It may
target several pipelines at once; the pipelines applied to are the keys of
``role_prompts``.
"""

from __future__ import annotations

from sqlalchemy import JSON, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fulcrum.database.models.base import Base, TimestampMixin


class Application(TimestampMixin, Base):
    """A submitted application.

    Attributes:
        id: UUID primary key (from TimestampMixin).
        name: Applicant's full name.
        pronouns: Applicant's pronouns.
        email: Contact email; unique per recruiting year.
        phone: Contact phone number.
        year_applied: Recruiting year of the submission.
        start_quarter: Quarter code of the first enrolled quarter.
        grad_quarter: Quarter code of the expected graduation quarter.
        major: Declared major.
        resume_url: Location of the uploaded resume.
        role_prompts: Pipeline identifier to prompt answer.
        blocklisted_reviewer_emails: Reviewers that must not be auto-assigned
            to this application. Entries are only ever appended.
        created_at: Row creation timestamp (from TimestampMixin).
        updated_at: Last modification timestamp (from TimestampMixin).
    """

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("email", "year_applied", name="uq_applications_email_year"),
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    pronouns: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str] = mapped_column(Text, nullable=False, default="")
    year_applied: Mapped[int] = mapped_column(Integer, nullable=False)
    start_quarter: Mapped[int] = mapped_column(Integer, nullable=False)
    grad_quarter: Mapped[int] = mapped_column(Integer, nullable=False)
    major: Mapped[str] = mapped_column(Text, nullable=False, default="")
    resume_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    role_prompts: Mapped[dict[str, str]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    blocklisted_reviewer_emails: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )
