"""Shared fixtures: a small stage catalog and applicant helpers.

The catalog mirrors the shape of the production table (a multi-stage
pipeline whose second stage is the developer phone screen) while keeping
review counts small enough to reason about in tests.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fulcrum.catalog import (
    FieldType,
    FormField,
    PipelineDefinition,
    StageCatalog,
    StageDefinition,
)
from fulcrum.grade_level import Quarter, calculate_quarter

# Recruiting cycle used throughout the tests
CYCLE_YEAR = 2024
NOW = datetime(CYCLE_YEAR, 10, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def first_year_quarters() -> dict[str, int]:
    """Start/grad quarters of an applicant in their first year."""
    return {
        "start_quarter": calculate_quarter(Quarter.FALL, CYCLE_YEAR),
        "grad_quarter": calculate_quarter(Quarter.SPRING, CYCLE_YEAR + 4),
    }


@pytest.fixture
def second_year_quarters() -> dict[str, int]:
    """Start/grad quarters of an applicant in their second year."""
    return {
        "start_quarter": calculate_quarter(Quarter.FALL, CYCLE_YEAR - 1),
        "grad_quarter": calculate_quarter(Quarter.SPRING, CYCLE_YEAR + 3),
    }


@pytest.fixture
def catalog() -> StageCatalog:
    """Engineering pipeline (stage ids 1-3, 2/1/1 reviews) plus a
    one-stage design pipeline (stage id 4, manual assignment)."""
    pipelines = [
        PipelineDefinition(identifier="engineering", name="Engineering"),
        PipelineDefinition(identifier="design", name="Design"),
    ]
    stages = [
        StageDefinition(
            id=1,
            identifier="resume_review",
            pipeline_id="engineering",
            pipeline_index=0,
            name="Resume Review",
            num_reviews=2,
            notify_reviewers_when_assigned=True,
            fields=(
                FormField(name="score", type=FieldType.number),
                FormField(name="notes", type=FieldType.string),
            ),
        ),
        StageDefinition(
            id=2,
            identifier="developer_phone_screen",
            pipeline_id="engineering",
            pipeline_index=1,
            name="Phone Screen",
            num_reviews=1,
            fields=(
                FormField(name="behavioral_score", type=FieldType.number, weight=2),
                FormField(name="notes", type=FieldType.string),
            ),
        ),
        StageDefinition(
            id=3,
            identifier="final_interview",
            pipeline_id="engineering",
            pipeline_index=2,
            name="Final Interview",
            num_reviews=1,
            fields=(FormField(name="rating", type=FieldType.number),),
        ),
        StageDefinition(
            id=4,
            identifier="portfolio_review",
            pipeline_id="design",
            pipeline_index=0,
            name="Portfolio Review",
            num_reviews=1,
            auto_assign_reviewers=False,
            fields=(FormField(name="score", type=FieldType.number),),
        ),
    ]
    return StageCatalog(pipelines, stages)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def fixed_clock():
    return lambda: NOW
