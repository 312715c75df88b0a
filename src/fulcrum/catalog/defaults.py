"""Production pipeline and stage table.

Stage ids are persisted on reviews, so existing ids must never be renumbered;
new stages take the next unused id.
"""

from __future__ import annotations

from fulcrum.catalog.catalog import StageCatalog
from fulcrum.catalog.models import FieldType, FormField, PipelineDefinition, StageDefinition


def _number(name: str, label: str, description: str = "", **kwargs: object) -> FormField:
    return FormField(name=name, type=FieldType.number, label=label, description=description, **kwargs)


def _string(name: str, label: str, description: str = "") -> FormField:
    return FormField(name=name, type=FieldType.string, label=label, description=description)


_RATING_HELP = "1 for bad, 2 for okay, 3 for great (see Appendix I of the technical interview guide)"
_QUESTION_HELP = "Enter 1 if you used the first question, or 2 if you used the second question"


PIPELINES: tuple[PipelineDefinition, ...] = (
    PipelineDefinition(identifier="designer", name="Designer"),
    PipelineDefinition(identifier="test_designer", name="TEST Designer"),
    PipelineDefinition(identifier="developer", name="Developer"),
    PipelineDefinition(identifier="test_developer", name="TEST Developer"),
)


STAGES: tuple[StageDefinition, ...] = (
    StageDefinition(
        id=1,
        identifier="test_designer_technical",
        pipeline_id="test_designer",
        pipeline_index=1,
        num_reviews=2,
        name="TEST Designer Technical Interview",
        fields=(_number("combined_score", "Score (out of 5)"),),
    ),
    StageDefinition(
        id=2,
        identifier="test_developer_technical",
        pipeline_id="test_developer",
        pipeline_index=1,
        num_reviews=1,
        name="TEST Developer Technical Interview",
        fields=(
            _number("behavioral_score", "Behavioral score"),
            _number("technical_score", "Technical score"),
        ),
    ),
    StageDefinition(
        id=3,
        identifier="test_developer_resume_review",
        pipeline_id="test_developer",
        pipeline_index=0,
        num_reviews=2,
        name="TEST Developer Resume Review",
        notify_reviewers_when_assigned=True,
        fields=(_number("score", "Score"),),
    ),
    StageDefinition(
        id=4,
        identifier="designer_phone_screen",
        pipeline_id="designer",
        pipeline_index=1,
        num_reviews=1,
        name="Designer Phone Screen",
        fields=(
            _number("general_score", "General score", weight=0.4),
            _number("grade_score", "Grade score", weight=0.6),
            _string("notes", "Notes"),
        ),
    ),
    StageDefinition(
        id=5,
        identifier="developer_resume_review",
        pipeline_id="developer",
        pipeline_index=0,
        num_reviews=2,
        name="Developer Resume Review",
        notify_reviewers_when_assigned=True,
        fields=(
            _number(
                "resume_score",
                "Resume score",
                "Out of 5",
                max_value=5,
                rubric_link="https://docs.google.com/document/d/1EsdDrFu9F7G0K_-Jvawhh4A58s5w2vJFBvHo9_7Zmz0/edit?usp=sharing",
            ),
            _number("blurb_score", "Blurb score", "Out of 4", max_value=4),
        ),
    ),
    StageDefinition(
        id=6,
        identifier="designer_technical",
        pipeline_id="designer",
        pipeline_index=2,
        num_reviews=1,
        name="Designer Technical Interview",
    ),
    StageDefinition(
        id=7,
        identifier="designer_resume_review",
        pipeline_id="designer",
        pipeline_index=0,
        num_reviews=2,
        name="Designer Resume Review",
        notify_reviewers_when_assigned=True,
        fields=(
            _number(
                "resume_score",
                "Resume score",
                "Out of 23 points",
                max_value=23,
                rubric_link="https://docs.google.com/spreadsheets/d/18hrzhhFH_9faubB8Ya079sdByf8fSqsOinyvNEnjoBc/edit",
            ),
            _number(
                "blurb_score",
                "Blurb score",
                "Out of 4 points",
                max_value=4,
                rubric_link="https://docs.google.com/document/d/1iUqwXcOAhgaOWGWmbeg5GlxdXxZS2UYAlnCclNZWg1E/edit",
            ),
        ),
    ),
    StageDefinition(
        id=8,
        identifier="developer_technical",
        pipeline_id="developer",
        pipeline_index=2,
        num_reviews=1,
        name="Developer Technical Interview",
        has_technical_interview=True,
        fields=(
            _number(
                "grade_level",
                "Which question did you use?",
                "Enter 1 for the first-year question, 2 for the sophomore question",
            ),
            _number("behavioral_rating", "Behavioral rating", _RATING_HELP, max_value=3),
            _string("behavioral_notes", "Behavioral notes"),
            _number("communication_rating", "Communication rating", _RATING_HELP, max_value=3),
            _string("communication_notes", "Communication notes"),
            _number("code_quality_rating", "Code quality rating", _RATING_HELP, max_value=3),
            _string("code_quality_notes", "Code quality notes"),
            _string("additional_notes", "Additional notes about the candidate"),
            _number(
                "programming_score",
                "Programming score",
                "Add up the points for the programming tasks",
            ),
            _string("doc_link", "Link to your copy of the technical interview Google Doc"),
        ),
    ),
    StageDefinition(
        id=9,
        identifier="test_designer_resume_review",
        pipeline_id="test_designer",
        pipeline_index=0,
        num_reviews=2,
        name="TEST Designer Resume Review",
        notify_reviewers_when_assigned=True,
        fields=(_number("combined_score", "Score"),),
    ),
    StageDefinition(
        id=10,
        identifier="developer_phone_screen",
        pipeline_id="developer",
        pipeline_index=1,
        num_reviews=1,
        name="Developer Phone Screen",
        fields=(
            _number(
                "behavioral_score",
                "Behavioral score",
                "Out of 5",
                weight=2,
                max_value=5,
                rubric_link="https://docs.google.com/document/d/1wO6xyCrB50SVGYJGVvkOOaT1QHWLytm8y9HCvNI3qEI/edit?usp=sharing",
            ),
            _number(
                "grade_level",
                "Which grade level of questions did you use?",
                "Enter 1 for first-year questions, 2 for sophomore/junior/senior questions",
            ),
            _number("conceptual_question", "Which conceptual question did you use?", _QUESTION_HELP),
            _number("conceptual_score", "Conceptual question score", "Out of 2", max_value=2),
            _number("testing_question", "Which testing question did you use?", _QUESTION_HELP),
            _number("testing_score", "Testing question score", "Out of 3", max_value=3),
            _number(
                "problem_solving_question",
                "Which problem-solving question did you use?",
                _QUESTION_HELP,
            ),
            _number(
                "problem_solving_score", "Problem-solving question score", "Out of 5", max_value=5
            ),
            _string("notes", "Link to your copy of the phone screen Google Doc"),
        ),
    ),
)


def default_catalog() -> StageCatalog:
    """Build the catalog of production pipelines and stages."""
    return StageCatalog(PIPELINES, STAGES)
