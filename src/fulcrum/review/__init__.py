"""Reviews: status, assignment, scoring and reviewer-facing operations.

Public API:
    ReviewStatus, get_review_status, ReviewLifecycle: Derived review status.
    ReviewAssignmentEngine: Reviewer selection and (re)assignment.
    ReviewService: Review creation, field entry and reviewer queues.
    weighted_score, average_score: Score aggregation.
"""

from fulcrum.review.assignment import DEFAULT_FIRST_YEAR_RESTRICTIONS, ReviewAssignmentEngine
from fulcrum.review.scoring import average_score, weighted_score
from fulcrum.review.service import ReviewService, validate_fields
from fulcrum.review.status import ReviewLifecycle, ReviewStatus, get_review_status

__all__ = [
    "ReviewStatus",
    "get_review_status",
    "ReviewLifecycle",
    "ReviewAssignmentEngine",
    "DEFAULT_FIRST_YEAR_RESTRICTIONS",
    "ReviewService",
    "validate_fields",
    "weighted_score",
    "average_score",
]
