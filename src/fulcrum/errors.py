"""Failure values and integrity errors for Fulcrum.

Expected business failures (a missing record, a precondition that is not
met, an assignment that found no reviewer) are returned to the caller as
:class:`Failure` values rather than raised, so callers can map them to a
user-facing message without exception handling. Only integrity violations
that indicate a programming or data-migration error are raised.

Example:
    >>> result = await machine.advance(application_id, "developer")
    >>> if is_failure(result):
    ...     print(result.kind.value, result.message)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, TypeGuard


class FailureCategory(str, enum.Enum):
    """Broad family a failure belongs to."""

    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    INCOMPLETE_PREREQUISITE = "incomplete_prerequisite"
    ASSIGNMENT_FAILURE = "assignment_failure"
    NOTIFICATION_FAILURE = "notification_failure"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    INTERNAL = "internal"


class FailureKind(str, enum.Enum):
    """Specific reason an operation did not succeed."""

    STAGE_NOT_FOUND = "stage_not_found"
    REVIEWER_NOT_FOUND = "reviewer_not_found"
    REVIEW_NOT_FOUND = "review_not_found"
    APPLICATION_NOT_FOUND = "application_not_found"
    PROGRESS_NOT_FOUND = "progress_not_found"
    PIPELINE_NOT_FOUND = "pipeline_not_found"
    INVALID_TRANSITION = "invalid_transition"
    REVIEWS_INCOMPLETE = "reviews_incomplete"
    NO_REVIEWERS_CONFIGURED = "no_reviewers_configured"
    NO_AUTO_ASSIGN_CANDIDATE = "no_auto_assign_candidate"
    ALREADY_ASSIGNED = "already_assigned"
    NOTIFICATION_FAILED = "notification_failed"
    DUPLICATE_APPLICATION = "duplicate_application"
    PROGRESS_EXISTS = "progress_exists"
    INVALID_FIELDS = "invalid_fields"
    REVIEW_COMPLETED = "review_completed"
    UNEXPECTED_ERROR = "unexpected_error"

    @property
    def category(self) -> FailureCategory:
        """Return the family this kind belongs to."""
        return _CATEGORIES[self]


_CATEGORIES: dict[FailureKind, FailureCategory] = {
    FailureKind.STAGE_NOT_FOUND: FailureCategory.NOT_FOUND,
    FailureKind.REVIEWER_NOT_FOUND: FailureCategory.NOT_FOUND,
    FailureKind.REVIEW_NOT_FOUND: FailureCategory.NOT_FOUND,
    FailureKind.APPLICATION_NOT_FOUND: FailureCategory.NOT_FOUND,
    FailureKind.PROGRESS_NOT_FOUND: FailureCategory.NOT_FOUND,
    FailureKind.PIPELINE_NOT_FOUND: FailureCategory.NOT_FOUND,
    FailureKind.INVALID_TRANSITION: FailureCategory.INVALID_TRANSITION,
    FailureKind.REVIEWS_INCOMPLETE: FailureCategory.INCOMPLETE_PREREQUISITE,
    FailureKind.NO_REVIEWERS_CONFIGURED: FailureCategory.ASSIGNMENT_FAILURE,
    FailureKind.NO_AUTO_ASSIGN_CANDIDATE: FailureCategory.ASSIGNMENT_FAILURE,
    FailureKind.ALREADY_ASSIGNED: FailureCategory.ASSIGNMENT_FAILURE,
    FailureKind.NOTIFICATION_FAILED: FailureCategory.NOTIFICATION_FAILURE,
    FailureKind.DUPLICATE_APPLICATION: FailureCategory.CONFLICT,
    FailureKind.PROGRESS_EXISTS: FailureCategory.CONFLICT,
    FailureKind.INVALID_FIELDS: FailureCategory.VALIDATION,
    FailureKind.REVIEW_COMPLETED: FailureCategory.CONFLICT,
    FailureKind.UNEXPECTED_ERROR: FailureCategory.INTERNAL,
}


@dataclass(frozen=True)
class Failure:
    """A typed, descriptive failure returned in place of a result.

    Attributes:
        kind: Specific failure reason.
        message: Human-readable description suitable for display.
    """

    kind: FailureKind
    message: str

    @property
    def category(self) -> FailureCategory:
        return self.kind.category

    def __str__(self) -> str:
        return self.message


def is_failure(value: Any) -> TypeGuard[Failure]:
    """Return True if an operation result is a Failure."""
    return isinstance(value, Failure)


class StageIntegrityError(Exception):
    """Raised when a stored review references a stage id that is not configured.

    Attributes:
        stage_id: The unknown stage identifier.
        review_id: The review that references it, if known.
    """

    def __init__(self, stage_id: int, review_id: str | None = None):
        self.stage_id = stage_id
        self.review_id = review_id
        msg = f"Stage {stage_id} is not configured"
        if review_id:
            msg += f" (referenced by review {review_id})"
        super().__init__(msg)


class CatalogError(ValueError):
    """Raised when a stage/pipeline table violates its structural invariants."""
