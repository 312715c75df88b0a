"""Progress state machine for Fulcrum.

This module moves an application through the ordered stages of a pipeline.
A progress is ``pending`` while it has stages ahead of it and ends either
``accepted`` (advanced past the final stage) or ``rejected``. Both end
states are terminal.

Advancing is gated on the reviews of the current stage: every review must
be completed before the application moves on. Entering a stage creates the
stage's review slots one at a time and auto-assigns each before creating
the next; the stage index is saved only after every slot exists.

Every operation on one progress runs under that progress's lock, and all
log lines of one operation (or of one bulk call) share a correlation id.

Example:
    >>> machine = ProgressStateMachine(catalog, progresses, reviews, applications, engine, notifier)
    >>> progress = await machine.create_progress(application.id, "developer")
    >>> result = await machine.advance(application.id, "developer")
    >>> if is_failure(result) and result.kind is FailureKind.REVIEWS_INCOMPLETE:
    ...     ...
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from uuid import UUID

import structlog

from fulcrum.catalog.models import StageDefinition
from fulcrum.config import EmailConfig
from fulcrum.database.models.progress import Progress, ProgressState
from fulcrum.errors import Failure, FailureKind, StageIntegrityError, is_failure
from fulcrum.logging import correlation_scope, review_context
from fulcrum.notifications import templates
from fulcrum.ports import (
    ApplicationRepository,
    NotificationPort,
    ProgressRepository,
    ReviewRepository,
    StageLookup,
)
from fulcrum.review.assignment import ReviewAssignmentEngine
from fulcrum.review.status import ReviewLifecycle, ReviewStatus

logger = structlog.get_logger(__name__)


# Authoritative state machine definition
VALID_TRANSITIONS: dict[ProgressState, set[ProgressState]] = {
    ProgressState.pending: {ProgressState.accepted, ProgressState.rejected},
    ProgressState.accepted: set(),  # Terminal
    ProgressState.rejected: set(),  # Terminal
}


def validate_transition(current: ProgressState, target: ProgressState) -> bool:
    """Validate if a state transition is allowed.

    Args:
        current: Current progress state.
        target: Target progress state.

    Returns:
        True if the transition is valid according to VALID_TRANSITIONS.
    """
    return target in VALID_TRANSITIONS.get(current, set())


@dataclass(frozen=True)
class BulkResult:
    """Outcome of one application within a bulk advance or reject."""

    application_id: UUID
    result: Progress | Failure

    @property
    def ok(self) -> bool:
        return not is_failure(self.result)


class ProgressStateMachine:
    """Creates, advances and rejects per-pipeline progress records.

    Operations on one (application, pipeline) progress are serialised by a
    per-progress lock held from loading the record until it is saved, so
    overlapping requests for the same application apply one after another.
    """

    def __init__(
        self,
        catalog: StageLookup,
        progresses: ProgressRepository,
        reviews: ReviewRepository,
        applications: ApplicationRepository,
        assignment: ReviewAssignmentEngine,
        notifier: NotificationPort,
        *,
        email_config: EmailConfig | None = None,
    ) -> None:
        self.catalog = catalog
        self.progresses = progresses
        self.reviews = reviews
        self.applications = applications
        self.assignment = assignment
        self.notifier = notifier
        self.email_config = email_config or EmailConfig()
        self.lifecycle = ReviewLifecycle(catalog)
        self.logger = logger.bind(component="ProgressStateMachine")
        self._progress_locks: defaultdict[tuple[UUID, str], asyncio.Lock] = defaultdict(
            asyncio.Lock
        )

    async def create_progress(
        self, application_id: UUID, pipeline_id: str
    ) -> Progress | Failure:
        """Start an application in a pipeline and enter its first stage."""
        if self.catalog.get_pipeline(pipeline_id) is None:
            return Failure(FailureKind.PIPELINE_NOT_FOUND, f"Pipeline not found: {pipeline_id}")

        with correlation_scope(), review_context(str(application_id), pipeline_id):
            async with self._progress_locks[(application_id, pipeline_id)]:
                existing = await self.progresses.get_by_pipeline_and_application(
                    pipeline_id, application_id
                )
                if existing is not None:
                    return Failure(
                        FailureKind.PROGRESS_EXISTS,
                        f"Application {application_id} already has progress in pipeline "
                        f"{pipeline_id}",
                    )

                await self.progresses.create(application_id, pipeline_id)
                return await self._advance(application_id, pipeline_id)

    async def advance(self, application_id: UUID, pipeline_id: str) -> Progress | Failure:
        """Move an application to the next stage of a pipeline.

        Fails if the current stage has any review that is not completed.
        Advancing past the last stage accepts the application.
        """
        with correlation_scope(), review_context(str(application_id), pipeline_id):
            async with self._progress_locks[(application_id, pipeline_id)]:
                return await self._advance(application_id, pipeline_id)

    async def reject(self, application_id: UUID, pipeline_id: str) -> Progress | Failure:
        """Reject an application from a pipeline after notifying the applicant.

        The state is left untouched if the rejection email cannot be sent.
        """
        with correlation_scope(), review_context(str(application_id), pipeline_id):
            async with self._progress_locks[(application_id, pipeline_id)]:
                return await self._reject(application_id, pipeline_id)

    async def bulk_advance(
        self, application_ids: Sequence[UUID], pipeline_id: str
    ) -> list[BulkResult]:
        """Advance many applications concurrently.

        Repeated ids are processed once; results follow the order in which
        each id first appears.
        """
        return await self._run_bulk(self.advance, application_ids, pipeline_id)

    async def bulk_reject(
        self, application_ids: Sequence[UUID], pipeline_id: str
    ) -> list[BulkResult]:
        """Reject many applications concurrently; same result contract as bulk_advance."""
        return await self._run_bulk(self.reject, application_ids, pipeline_id)

    async def _advance(self, application_id: UUID, pipeline_id: str) -> Progress | Failure:
        progress = await self._load_pending(application_id, pipeline_id, "advance")
        if is_failure(progress):
            return progress

        if progress.stage_index >= 0:
            current_stage = self.catalog.get_by_pipeline_and_index(
                pipeline_id, progress.stage_index
            )
            if current_stage is None:
                return Failure(
                    FailureKind.STAGE_NOT_FOUND,
                    f"No stage at index {progress.stage_index} in pipeline {pipeline_id}",
                )
            reviews = await self.reviews.find_by_stage_and_application(
                current_stage.id, application_id
            )
            incomplete = [
                r for r in reviews if self.lifecycle.status(r) is not ReviewStatus.completed
            ]
            if incomplete:
                self.logger.info(
                    "advance_blocked",
                    stage=current_stage.identifier,
                    incomplete_reviews=len(incomplete),
                )
                return Failure(
                    FailureKind.REVIEWS_INCOMPLETE,
                    f"Cannot advance; {len(incomplete)} of {len(reviews)} reviews for "
                    f"{current_stage.name} are not completed",
                )

        next_index = progress.stage_index + 1
        next_stage = self.catalog.get_by_pipeline_and_index(pipeline_id, next_index)

        if next_stage is None:
            progress.state = ProgressState.accepted
            progress = await self.progresses.save(progress)
            self.logger.info("progress_accepted", stage_index=progress.stage_index)
            return progress

        created = await self._fill_review_slots(next_stage, application_id)

        # The stage index moves only once every slot exists, so an
        # interrupted advance is retried from the previous stage.
        progress.stage_index = next_index
        progress = await self.progresses.save(progress)

        self.logger.info(
            "progress_advanced",
            stage_index=next_index,
            stage=next_stage.identifier,
            reviews_created=created,
        )
        return progress

    async def _fill_review_slots(self, stage: StageDefinition, application_id: UUID) -> int:
        """Create the stage's missing review slots, assigning each in turn.

        Slots left behind by an earlier interrupted advance count towards the
        stage's required number of reviews.

        Returns:
            Number of reviews created.
        """
        existing = await self.reviews.find_by_stage_and_application(stage.id, application_id)
        missing = max(stage.num_reviews - len(existing), 0)

        # Slots are filled one after another so each assignment sees the
        # previous one in the load counts.
        for _ in range(missing):
            review = await self.reviews.create(stage.id, application_id)
            if not stage.auto_assign_reviewers:
                continue
            assigned = await self.assignment.assign(review.id)
            if is_failure(assigned):
                self.logger.warning(
                    "review_left_unassigned",
                    review_id=str(review.id),
                    stage=stage.identifier,
                    reason=assigned.message,
                )
        return missing

    async def _reject(self, application_id: UUID, pipeline_id: str) -> Progress | Failure:
        progress = await self._load_pending(application_id, pipeline_id, "reject")
        if is_failure(progress):
            return progress

        application = await self.applications.get_by_id(application_id)
        if application is None:
            return Failure(
                FailureKind.APPLICATION_NOT_FOUND, f"Application not found: {application_id}"
            )

        pipeline = self.catalog.get_pipeline(pipeline_id)
        if pipeline is None:
            return Failure(FailureKind.PIPELINE_NOT_FOUND, f"Pipeline not found: {pipeline_id}")

        message = templates.application_rejected(
            application.email,
            applicant_name=application.name,
            pipeline_name=pipeline.name,
            organization_name=self.email_config.organization_name,
        )
        try:
            sent = await self.notifier.send(message.recipient, message.subject, message.body)
        except Exception as e:
            self.logger.error("rejection_email_error", error=str(e))
            sent = False

        if not sent:
            return Failure(
                FailureKind.NOTIFICATION_FAILED,
                "Failed to send rejection email; the application was not rejected",
            )

        progress.state = ProgressState.rejected
        progress = await self.progresses.save(progress)
        self.logger.info("progress_rejected", stage_index=progress.stage_index)
        return progress

    async def _run_bulk(
        self,
        operation: Callable[[UUID, str], Awaitable[Progress | Failure]],
        application_ids: Sequence[UUID],
        pipeline_id: str,
    ) -> list[BulkResult]:
        unique_ids = list(dict.fromkeys(application_ids))

        with correlation_scope():
            outcomes = await asyncio.gather(
                *(operation(application_id, pipeline_id) for application_id in unique_ids),
                return_exceptions=True,
            )

            results: list[BulkResult] = []
            for application_id, outcome in zip(unique_ids, outcomes):
                if isinstance(outcome, BaseException):
                    # Integrity violations stay fatal even inside a bulk run
                    if isinstance(outcome, StageIntegrityError) or not isinstance(
                        outcome, Exception
                    ):
                        raise outcome
                    self.logger.error(
                        "bulk_item_error",
                        operation=operation.__name__,
                        application_id=str(application_id),
                        error=str(outcome),
                    )
                    outcome = Failure(
                        FailureKind.UNEXPECTED_ERROR,
                        f"Unexpected error for application {application_id}: {outcome}",
                    )
                results.append(BulkResult(application_id=application_id, result=outcome))

            succeeded = sum(1 for r in results if r.ok)
            self.logger.info(
                "bulk_operation_completed",
                operation=operation.__name__,
                pipeline_id=pipeline_id,
                requested=len(application_ids),
                total=len(results),
                succeeded=succeeded,
                failed=len(results) - succeeded,
            )
        return results

    async def _load_pending(
        self, application_id: UUID, pipeline_id: str, action: str
    ) -> Progress | Failure:
        progress = await self.progresses.get_by_pipeline_and_application(
            pipeline_id, application_id
        )
        if progress is None:
            return Failure(
                FailureKind.PROGRESS_NOT_FOUND,
                f"No progress exists for pipeline {pipeline_id} and application {application_id}",
            )
        target = ProgressState.accepted if action == "advance" else ProgressState.rejected
        if not validate_transition(progress.state, target):
            return Failure(
                FailureKind.INVALID_TRANSITION,
                f"Cannot {action}; application is already {progress.state.value}",
            )
        return progress
