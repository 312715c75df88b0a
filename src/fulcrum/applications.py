"""Application submission.

A submission creates the application record, confirms receipt to the
applicant and starts a progress in every pipeline the applicant chose.
"""

from __future__ import annotations

import structlog
from pydantic import BaseModel, Field

from fulcrum.config import EmailConfig
from fulcrum.database.models.application import Application
from fulcrum.errors import Failure, FailureKind, is_failure
from fulcrum.logging import correlation_scope
from fulcrum.notifications import templates
from fulcrum.orchestrator.state_machine import ProgressStateMachine
from fulcrum.ports import ApplicationRepository, NotificationPort, StageLookup

logger = structlog.get_logger(__name__)


class ApplicationSubmission(BaseModel):
    """Data entered on the application form.

    Attributes:
        role_prompts: Pipeline identifier to the applicant's answer for that
            role. The keys are the pipelines applied to.
    """

    name: str = Field(..., min_length=1)
    pronouns: str = ""
    email: str = Field(..., min_length=3)
    phone: str = ""
    year_applied: int
    start_quarter: int
    grad_quarter: int
    major: str = ""
    resume_url: str = ""
    role_prompts: dict[str, str] = Field(..., min_length=1)


class ApplicationService:
    """Accepts new applications."""

    def __init__(
        self,
        catalog: StageLookup,
        applications: ApplicationRepository,
        progress: ProgressStateMachine,
        notifier: NotificationPort,
        *,
        email_config: EmailConfig | None = None,
    ) -> None:
        self.catalog = catalog
        self.applications = applications
        self.progress = progress
        self.notifier = notifier
        self.email_config = email_config or EmailConfig()
        self._logger = logger.bind(component="ApplicationService")

    async def submit(self, data: ApplicationSubmission) -> Application | Failure:
        """Store a submission and enter it into each chosen pipeline.

        Returns:
            The created Application, or a Failure if the email already
            applied this year or a chosen pipeline does not exist.
        """
        with correlation_scope():
            return await self._submit(data)

    async def _submit(self, data: ApplicationSubmission) -> Application | Failure:
        existing = await self.applications.find_by_email_and_year(data.email, data.year_applied)
        if existing is not None:
            return Failure(
                FailureKind.DUPLICATE_APPLICATION,
                f"The email address {data.email} was already used to submit an application "
                f"in {data.year_applied}.",
            )

        for pipeline_id in data.role_prompts:
            if self.catalog.get_pipeline(pipeline_id) is None:
                return Failure(
                    FailureKind.PIPELINE_NOT_FOUND, f"Pipeline not found: {pipeline_id}"
                )

        application = await self.applications.create(**data.model_dump())

        message = templates.application_received(
            application.email,
            applicant_name=application.name,
            organization_name=self.email_config.organization_name,
        )
        try:
            sent = await self.notifier.send(message.recipient, message.subject, message.body)
        except Exception as e:
            self._logger.error(
                "confirmation_email_error",
                application_id=str(application.id),
                error=str(e),
            )
        else:
            if not sent:
                self._logger.warning(
                    "confirmation_email_failed", application_id=str(application.id)
                )

        for pipeline_id in data.role_prompts:
            result = await self.progress.create_progress(application.id, pipeline_id)
            if is_failure(result):
                self._logger.warning(
                    "progress_start_failed",
                    application_id=str(application.id),
                    pipeline_id=pipeline_id,
                    reason=result.message,
                )

        self._logger.info(
            "application_submitted",
            application_id=str(application.id),
            pipelines=sorted(data.role_prompts),
        )
        return application
