"""Static pipeline and stage configuration.

Public API:
    StageCatalog: Validated read-only index of pipelines and stages.
    StageDefinition, PipelineDefinition, FormField, FieldType: Table rows.
    default_catalog: Catalog of the production stage table.
"""

from fulcrum.catalog.catalog import StageCatalog
from fulcrum.catalog.defaults import PIPELINES, STAGES, default_catalog
from fulcrum.catalog.models import FieldType, FormField, PipelineDefinition, StageDefinition

__all__ = [
    "StageCatalog",
    "StageDefinition",
    "PipelineDefinition",
    "FormField",
    "FieldType",
    "PIPELINES",
    "STAGES",
    "default_catalog",
]
