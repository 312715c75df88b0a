"""Unit tests for failure values and integrity errors."""

from __future__ import annotations

import pytest

from fulcrum.errors import (
    CatalogError,
    Failure,
    FailureCategory,
    FailureKind,
    StageIntegrityError,
    is_failure,
)


def test_every_kind_has_a_category() -> None:
    for kind in FailureKind:
        assert isinstance(kind.category, FailureCategory)


@pytest.mark.parametrize(
    ("kind", "category"),
    [
        (FailureKind.REVIEW_NOT_FOUND, FailureCategory.NOT_FOUND),
        (FailureKind.INVALID_TRANSITION, FailureCategory.INVALID_TRANSITION),
        (FailureKind.REVIEWS_INCOMPLETE, FailureCategory.INCOMPLETE_PREREQUISITE),
        (FailureKind.NO_AUTO_ASSIGN_CANDIDATE, FailureCategory.ASSIGNMENT_FAILURE),
        (FailureKind.NOTIFICATION_FAILED, FailureCategory.NOTIFICATION_FAILURE),
        (FailureKind.DUPLICATE_APPLICATION, FailureCategory.CONFLICT),
        (FailureKind.REVIEW_COMPLETED, FailureCategory.CONFLICT),
        (FailureKind.INVALID_FIELDS, FailureCategory.VALIDATION),
    ],
)
def test_failure_category(kind: FailureKind, category: FailureCategory) -> None:
    assert Failure(kind, "message").category is category


def test_failure_str_is_message() -> None:
    assert str(Failure(FailureKind.STAGE_NOT_FOUND, "Stage not found: 9")) == "Stage not found: 9"


def test_is_failure() -> None:
    assert is_failure(Failure(FailureKind.PROGRESS_NOT_FOUND, "missing"))
    assert not is_failure(None)
    assert not is_failure("Review not found")


def test_failure_is_immutable() -> None:
    failure = Failure(FailureKind.REVIEW_NOT_FOUND, "missing")
    with pytest.raises(AttributeError):
        failure.message = "other"  # type: ignore[misc]


def test_stage_integrity_error_message() -> None:
    error = StageIntegrityError(99, review_id="r-1")
    assert error.stage_id == 99
    assert error.review_id == "r-1"
    assert "99" in str(error)
    assert "r-1" in str(error)


def test_catalog_error_is_value_error() -> None:
    assert issubclass(CatalogError, ValueError)
