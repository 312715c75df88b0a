"""Review status derivation.

A review's status is not stored; it is derived from which of the stage's
form fields have values.
"""

from __future__ import annotations

import enum

from fulcrum.catalog.models import StageDefinition
from fulcrum.database.models.review import Review
from fulcrum.errors import StageIntegrityError
from fulcrum.ports import StageLookup


class ReviewStatus(str, enum.Enum):
    """Derived progress of a single review."""

    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"


def get_review_status(review: Review, stage: StageDefinition) -> ReviewStatus:
    """Derive the status of a review against its stage's form schema.

    A review is completed once every schema field has a non-None value.
    Fields not in the schema are ignored.
    """
    fields = review.fields or {}
    if not fields:
        return ReviewStatus.not_started
    if all(fields.get(name) is not None for name in stage.field_names):
        return ReviewStatus.completed
    return ReviewStatus.in_progress


class ReviewLifecycle:
    """Resolves a review's stage and derives its status."""

    def __init__(self, catalog: StageLookup) -> None:
        self.catalog = catalog

    def stage_for(self, review: Review) -> StageDefinition:
        """Stage a review belongs to.

        Raises:
            StageIntegrityError: If the review's stage id is not configured.
        """
        stage = self.catalog.get_by_id(review.stage_id)
        if stage is None:
            raise StageIntegrityError(review.stage_id, str(review.id) if review.id else None)
        return stage

    def status(self, review: Review) -> ReviewStatus:
        return get_review_status(review, self.stage_for(review))

    def is_completed(self, review: Review) -> bool:
        return self.status(review) is ReviewStatus.completed
