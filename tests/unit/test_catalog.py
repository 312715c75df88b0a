"""Unit tests for the stage catalog and the production stage table."""

from __future__ import annotations

import pytest

from fulcrum.catalog import (
    FieldType,
    FormField,
    PipelineDefinition,
    StageCatalog,
    StageDefinition,
    default_catalog,
)
from fulcrum.errors import CatalogError


def _stage(id: int, identifier: str, pipeline_id: str = "p", index: int = 0) -> StageDefinition:
    return StageDefinition(
        id=id,
        identifier=identifier,
        pipeline_id=pipeline_id,
        pipeline_index=index,
        name=identifier.title(),
        num_reviews=1,
    )


PIPELINE = PipelineDefinition(identifier="p", name="P")


class TestStageCatalogLookups:
    def test_lookup_by_id_and_identifier(self, catalog: StageCatalog) -> None:
        stage = catalog.get_by_id(2)
        assert stage is not None
        assert stage.identifier == "developer_phone_screen"
        assert catalog.get_by_identifier("developer_phone_screen") is stage

    def test_unknown_lookups_return_none(self, catalog: StageCatalog) -> None:
        assert catalog.get_by_id(999) is None
        assert catalog.get_by_identifier("nope") is None
        assert catalog.get_pipeline("nope") is None
        assert catalog.get_by_pipeline("nope") == []

    def test_get_by_pipeline_is_ordered(self, catalog: StageCatalog) -> None:
        stages = catalog.get_by_pipeline("engineering")
        assert [s.pipeline_index for s in stages] == [0, 1, 2]
        assert [s.num_reviews for s in stages] == [2, 1, 1]

    def test_get_by_pipeline_and_index_bounds(self, catalog: StageCatalog) -> None:
        assert catalog.get_by_pipeline_and_index("engineering", 0).identifier == "resume_review"
        assert catalog.get_by_pipeline_and_index("engineering", 3) is None
        assert catalog.get_by_pipeline_and_index("engineering", -1) is None

    def test_returned_lists_are_copies(self, catalog: StageCatalog) -> None:
        catalog.get_by_pipeline("engineering").clear()
        assert len(catalog.get_by_pipeline("engineering")) == 3


class TestStageCatalogValidation:
    def test_duplicate_stage_id(self) -> None:
        with pytest.raises(CatalogError, match="Duplicate stage id"):
            StageCatalog([PIPELINE], [_stage(1, "a"), _stage(1, "b", index=1)])

    def test_duplicate_identifier(self) -> None:
        with pytest.raises(CatalogError, match="Duplicate stage identifier"):
            StageCatalog([PIPELINE], [_stage(1, "a"), _stage(2, "a", index=1)])

    def test_unknown_pipeline(self) -> None:
        with pytest.raises(CatalogError, match="unknown pipeline"):
            StageCatalog([PIPELINE], [_stage(1, "a", pipeline_id="other")])

    def test_two_stages_at_same_index(self) -> None:
        with pytest.raises(CatalogError, match="two stages at index 0"):
            StageCatalog([PIPELINE], [_stage(1, "a"), _stage(2, "b")])

    def test_gap_in_indices(self) -> None:
        with pytest.raises(CatalogError, match="not contiguous"):
            StageCatalog([PIPELINE], [_stage(1, "a"), _stage(2, "b", index=2)])

    def test_duplicate_pipeline(self) -> None:
        with pytest.raises(CatalogError, match="Duplicate pipeline"):
            StageCatalog([PIPELINE, PIPELINE], [])


class TestStageDefinition:
    def test_field_lookup(self) -> None:
        stage = StageDefinition(
            id=1,
            identifier="s",
            pipeline_id="p",
            pipeline_index=0,
            name="S",
            num_reviews=1,
            fields=(
                FormField(name="score", type=FieldType.number, weight=2),
                FormField(name="notes", type=FieldType.string),
            ),
        )
        assert stage.field_names == ["score", "notes"]
        assert stage.get_field("score").weight == 2
        assert stage.get_field("missing") is None

    def test_frozen(self) -> None:
        stage = _stage(1, "a")
        with pytest.raises(Exception):
            stage.num_reviews = 5  # type: ignore[misc]


class TestDefaultCatalog:
    def test_builds_without_errors(self) -> None:
        catalog = default_catalog()
        assert {p.identifier for p in catalog.pipelines} == {
            "designer",
            "test_designer",
            "developer",
            "test_developer",
        }
        assert len(catalog.stages) == 10

    def test_developer_pipeline_order(self) -> None:
        stages = default_catalog().get_by_pipeline("developer")
        assert [s.identifier for s in stages] == [
            "developer_resume_review",
            "developer_phone_screen",
            "developer_technical",
        ]
        assert [s.num_reviews for s in stages] == [2, 1, 1]

    def test_resume_reviews_notify_reviewers(self) -> None:
        catalog = default_catalog()
        assert catalog.get_by_identifier("developer_resume_review").notify_reviewers_when_assigned
        assert not catalog.get_by_identifier("developer_phone_screen").notify_reviewers_when_assigned

    def test_technical_interview_flag(self) -> None:
        stage = default_catalog().get_by_identifier("developer_technical")
        assert stage.has_technical_interview
