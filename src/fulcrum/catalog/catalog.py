"""Read-only lookup over the configured pipelines and stages.

The catalog is built once from a stage table and injected into every
component that needs stage metadata, which lets tests run against small
purpose-built pipelines instead of the production table.

Example:
    >>> catalog = StageCatalog(pipelines, stages)
    >>> first = catalog.get_by_pipeline_and_index("developer", 0)
    >>> first.identifier
    'developer_resume_review'
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

import structlog

from fulcrum.catalog.models import PipelineDefinition, StageDefinition
from fulcrum.errors import CatalogError

logger = structlog.get_logger(__name__)


class StageCatalog:
    """Immutable index of pipelines and their ordered stages.

    Construction validates the table:
    - stage ids and identifiers are unique,
    - every stage belongs to a known pipeline,
    - each pipeline's indices are exactly ``0..n-1`` with one stage per index.

    Raises:
        CatalogError: If any invariant is violated.
    """

    def __init__(
        self,
        pipelines: Iterable[PipelineDefinition],
        stages: Iterable[StageDefinition],
    ) -> None:
        self._pipelines: dict[str, PipelineDefinition] = {}
        for pipeline in pipelines:
            if pipeline.identifier in self._pipelines:
                raise CatalogError(f"Duplicate pipeline identifier: {pipeline.identifier}")
            self._pipelines[pipeline.identifier] = pipeline

        self._by_id: dict[int, StageDefinition] = {}
        self._by_identifier: dict[str, StageDefinition] = {}
        grouped: dict[str, dict[int, StageDefinition]] = defaultdict(dict)

        for stage in stages:
            if stage.id in self._by_id:
                raise CatalogError(f"Duplicate stage id: {stage.id}")
            if stage.identifier in self._by_identifier:
                raise CatalogError(f"Duplicate stage identifier: {stage.identifier}")
            if stage.pipeline_id not in self._pipelines:
                raise CatalogError(
                    f"Stage {stage.identifier} references unknown pipeline {stage.pipeline_id}"
                )
            if stage.pipeline_index in grouped[stage.pipeline_id]:
                raise CatalogError(
                    f"Pipeline {stage.pipeline_id} has two stages at index {stage.pipeline_index}"
                )
            self._by_id[stage.id] = stage
            self._by_identifier[stage.identifier] = stage
            grouped[stage.pipeline_id][stage.pipeline_index] = stage

        self._by_pipeline: dict[str, list[StageDefinition]] = {}
        for pipeline_id in self._pipelines:
            indexed = grouped.get(pipeline_id, {})
            if sorted(indexed) != list(range(len(indexed))):
                raise CatalogError(
                    f"Pipeline {pipeline_id} stage indices are not contiguous from 0: "
                    f"{sorted(indexed)}"
                )
            self._by_pipeline[pipeline_id] = [indexed[i] for i in range(len(indexed))]

        logger.debug(
            "stage_catalog_loaded",
            pipeline_count=len(self._pipelines),
            stage_count=len(self._by_id),
        )

    def get_by_id(self, stage_id: int) -> StageDefinition | None:
        return self._by_id.get(stage_id)

    def get_by_identifier(self, identifier: str) -> StageDefinition | None:
        return self._by_identifier.get(identifier)

    def get_by_pipeline(self, pipeline_id: str) -> list[StageDefinition]:
        """Stages of a pipeline ordered by index (empty for unknown pipelines)."""
        return list(self._by_pipeline.get(pipeline_id, []))

    def get_by_pipeline_and_index(
        self, pipeline_id: str, index: int
    ) -> StageDefinition | None:
        stages = self._by_pipeline.get(pipeline_id, [])
        if 0 <= index < len(stages):
            return stages[index]
        return None

    def get_pipeline(self, pipeline_id: str) -> PipelineDefinition | None:
        return self._pipelines.get(pipeline_id)

    @property
    def pipelines(self) -> list[PipelineDefinition]:
        return list(self._pipelines.values())

    @property
    def stages(self) -> list[StageDefinition]:
        return list(self._by_id.values())
