"""Review operations exposed to reviewers and administrators.

Wraps review creation, field entry and per-reviewer queues around the
assignment engine and the review store.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import UUID

import structlog

from fulcrum.catalog.models import FieldType, StageDefinition
from fulcrum.database.models.review import Review
from fulcrum.errors import Failure, FailureKind, is_failure
from fulcrum.ports import ApplicationRepository, ReviewRepository, StageLookup
from fulcrum.review.assignment import ReviewAssignmentEngine
from fulcrum.review.status import ReviewLifecycle, ReviewStatus

logger = structlog.get_logger(__name__)


def validate_fields(stage: StageDefinition, fields: Mapping[str, Any]) -> list[str]:
    """Check entered values against a stage's form schema.

    ``None`` is accepted for any known field and clears its value.

    Returns:
        One message per invalid entry; empty when everything is valid.
    """
    errors: list[str] = []
    for name, value in fields.items():
        field = stage.get_field(name)
        if field is None:
            errors.append(f"Unknown field for {stage.identifier}: {name}")
            continue
        if value is None:
            continue
        if field.type is FieldType.number:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"Field {name} must be a number")
        elif not isinstance(value, str):
            errors.append(f"Field {name} must be a string")
    return errors


class ReviewService:
    """Create reviews, record reviewer input and serve reviewer queues."""

    def __init__(
        self,
        catalog: StageLookup,
        reviews: ReviewRepository,
        applications: ApplicationRepository,
        assignment: ReviewAssignmentEngine,
    ) -> None:
        self.catalog = catalog
        self.reviews = reviews
        self.applications = applications
        self.assignment = assignment
        self.lifecycle = ReviewLifecycle(catalog)
        self._logger = logger.bind(component="ReviewService")

    async def create_review(self, stage_id: int, application_id: UUID) -> Review | Failure:
        """Create an extra review for an application at a stage.

        The review is kept even when auto-assignment fails.
        """
        stage = self.catalog.get_by_id(stage_id)
        if stage is None:
            return Failure(FailureKind.STAGE_NOT_FOUND, f"Stage not found: {stage_id}")

        application = await self.applications.get_by_id(application_id)
        if application is None:
            return Failure(
                FailureKind.APPLICATION_NOT_FOUND, f"Application not found: {application_id}"
            )

        review = await self.reviews.create(stage.id, application.id)
        if not stage.auto_assign_reviewers:
            return review

        assigned = await self.assignment.assign(review.id)
        if is_failure(assigned):
            self._logger.warning(
                "review_left_unassigned",
                review_id=str(review.id),
                stage=stage.identifier,
                reason=assigned.message,
            )
            return review
        return assigned

    async def update_fields(
        self, review_id: UUID, fields: Mapping[str, Any]
    ) -> Review | Failure:
        """Merge reviewer-entered values into a review.

        A completed review is frozen: it may already have let the application
        advance, so neither new values nor cleared ones are accepted.
        """
        review = await self.reviews.get_by_id(review_id)
        if review is None:
            return Failure(FailureKind.REVIEW_NOT_FOUND, f"Review not found: {review_id}")

        stage = self.lifecycle.stage_for(review)
        if self.lifecycle.status(review) is ReviewStatus.completed:
            return Failure(
                FailureKind.REVIEW_COMPLETED, f"Cannot update completed review: {review_id}"
            )

        errors = validate_fields(stage, fields)
        if errors:
            return Failure(FailureKind.INVALID_FIELDS, "; ".join(errors))

        review.fields = {**(review.fields or {}), **fields}
        review = await self.reviews.save(review)

        self._logger.info(
            "review_fields_updated",
            review_id=str(review_id),
            updated=sorted(fields),
            status=self.lifecycle.status(review).value,
        )
        return review

    async def get_status(self, review_id: UUID) -> ReviewStatus | Failure:
        review = await self.reviews.get_by_id(review_id)
        if review is None:
            return Failure(FailureKind.REVIEW_NOT_FOUND, f"Review not found: {review_id}")
        return self.lifecycle.status(review)

    async def list_for_reviewer(
        self, reviewer_email: str, include_completed: bool = False
    ) -> list[Review]:
        """Reviews assigned to a reviewer, oldest first."""
        reviews = await self.reviews.find_by_reviewer(reviewer_email)
        if include_completed:
            return reviews
        return [r for r in reviews if self.lifecycle.status(r) is not ReviewStatus.completed]

    async def get_next_review_for_reviewer(self, reviewer_email: str) -> Review | None:
        """The review a reviewer should work on next.

        Untouched reviews come first, then partially filled ones; within each
        group the oldest wins.
        """
        reviews = await self.reviews.find_by_reviewer(reviewer_email)
        for wanted in (ReviewStatus.not_started, ReviewStatus.in_progress):
            for review in reviews:
                if self.lifecycle.status(review) is wanted:
                    return review
        return None
