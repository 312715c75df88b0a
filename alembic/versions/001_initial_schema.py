"""Initial schema for Fulcrum.

Creates the applications, progresses, reviews and reviewers tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    progress_state = sa.Enum("pending", "accepted", "rejected", name="progress_state")

    op.create_table(
        "applications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("pronouns", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=False),
        sa.Column("year_applied", sa.Integer(), nullable=False),
        sa.Column("start_quarter", sa.Integer(), nullable=False),
        sa.Column("grad_quarter", sa.Integer(), nullable=False),
        sa.Column("major", sa.Text(), nullable=False),
        sa.Column("resume_url", sa.Text(), nullable=False),
        sa.Column("role_prompts", sa.JSON(), nullable=False),
        sa.Column("blocklisted_reviewer_emails", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("email", "year_applied", name="uq_applications_email_year"),
    )

    op.create_table(
        "progresses",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("application_id", sa.Uuid(), sa.ForeignKey("applications.id"), nullable=False),
        sa.Column("pipeline_id", sa.Text(), nullable=False),
        sa.Column("stage_index", sa.Integer(), nullable=False),
        sa.Column("state", progress_state, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "application_id", "pipeline_id", name="uq_progresses_application_pipeline"
        ),
    )

    op.create_table(
        "reviews",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("stage_id", sa.Integer(), nullable=False),
        sa.Column("application_id", sa.Uuid(), sa.ForeignKey("applications.id"), nullable=False),
        sa.Column("reviewer_email", sa.Text(), nullable=True),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.Column("interview_id", sa.Uuid(), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_reviews_stage_application", "reviews", ["stage_id", "application_id"])
    op.create_index("idx_reviews_reviewer_stage", "reviews", ["reviewer_email", "stage_id"])

    op.create_table(
        "reviewers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        sa.Column("assigned_stage_ids", sa.JSON(), nullable=False),
        sa.Column("only_first_year_phone_screen", sa.Boolean(), nullable=False),
        sa.Column("only_first_year_technical", sa.Boolean(), nullable=False),
        sa.Column("is_doing_interview_alone", sa.Boolean(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("reviewers")
    op.drop_index("idx_reviews_reviewer_stage", table_name="reviews")
    op.drop_index("idx_reviews_stage_application", table_name="reviews")
    op.drop_table("reviews")
    op.drop_table("progresses")
    op.drop_table("applications")

    sa.Enum(name="progress_state").drop(op.get_bind(), checkfirst=True)
