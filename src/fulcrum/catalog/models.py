"""Stage and pipeline definitions.

Stage definitions are static configuration: they are never written by the
application, only looked up. They are modelled as frozen Pydantic models so a
catalog can be shared across concurrent operations safely.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


class FieldType(str, enum.Enum):
    """Value type a reviewer enters for a form field."""

    number = "number"
    string = "string"


class FormField(BaseModel):
    """One entry of a stage's review form.

    Attributes:
        name: Key under which the value is stored in ``Review.fields``.
        type: Expected value type.
        label: Short label shown to reviewers.
        description: Longer guidance shown under the label.
        weight: Multiplier applied when the field contributes to a score.
        max_value: Upper bound displayed next to scores.
        rubric_link: Link to the grading rubric for this field.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: FieldType
    label: str = ""
    description: str = ""
    weight: float | None = None
    max_value: float | None = None
    rubric_link: str | None = None


class StageDefinition(BaseModel):
    """One ordered step of a pipeline.

    Attributes:
        id: Numeric stage id stored on reviews.
        identifier: Unique symbolic name, e.g. ``developer_phone_screen``.
        pipeline_id: Identifier of the owning pipeline.
        pipeline_index: 0-based position within the pipeline.
        name: Display name.
        num_reviews: Reviews created when an application enters the stage.
        auto_assign_reviewers: Assign reviewers automatically on creation.
        notify_reviewers_when_assigned: Email reviewers when assigned.
        has_technical_interview: Reviews link to a live interview session.
        fields: Ordered review form schema.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    identifier: str
    pipeline_id: str
    pipeline_index: int = Field(..., ge=0)
    name: str
    num_reviews: int = Field(..., ge=0)
    auto_assign_reviewers: bool = True
    notify_reviewers_when_assigned: bool = False
    has_technical_interview: bool = False
    fields: tuple[FormField, ...] = ()

    @property
    def field_names(self) -> list[str]:
        """Names of the schema fields in display order."""
        return [field.name for field in self.fields]

    def get_field(self, name: str) -> FormField | None:
        """Look up a schema field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None


class PipelineDefinition(BaseModel):
    """A named, ordered sequence of stages (e.g. "Developer")."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    name: str
