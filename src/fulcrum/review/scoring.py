"""Score aggregation over completed reviews."""

from __future__ import annotations

from collections.abc import Sequence

from fulcrum.catalog.models import FieldType, StageDefinition
from fulcrum.database.models.review import Review
from fulcrum.review.status import ReviewStatus, get_review_status


def weighted_score(review: Review, stage: StageDefinition) -> float:
    """Sum of a review's score fields, each multiplied by its weight.

    Only number fields whose name ends in ``score`` contribute; a missing
    weight counts as 1 and a missing value as 0.
    """
    fields = review.fields or {}
    total = 0.0
    for field in stage.fields:
        if field.type is not FieldType.number or not field.name.endswith("score"):
            continue
        value = fields.get(field.name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        total += value * (field.weight if field.weight is not None else 1)
    return total


def average_score(reviews: Sequence[Review], stage: StageDefinition) -> float:
    """Average weighted score of a stage's reviews.

    Incomplete reviews contribute nothing to the sum but still count in the
    denominator, so a stage with outstanding reviews scores lower.
    """
    if not reviews:
        return 0.0
    completed = [r for r in reviews if get_review_status(r, stage) is ReviewStatus.completed]
    return sum(weighted_score(r, stage) for r in completed) / len(reviews)
