"""Reviewer assignment for reviews.

The engine picks a reviewer for a review slot by narrowing the stage's
eligible reviewers and then balancing load across them:

1. Reviewers eligible for the stage (``NoReviewersConfigured`` if none).
2. Minus reviewers on the application's block-list.
3. Minus reviewers who already review this application, unless that would
   leave nobody.
4. First-year restrictions for the stages that have them, unless that would
   leave nobody.
5. Least-loaded reviewer for this stage, solo interviewers counting double,
   ties broken at random.

Load counts are read and the chosen assignment is written under a per-stage
lock, so two reviews entering the same stage concurrently never both see
the same idle reviewer.

Example:
    >>> engine = ReviewAssignmentEngine(catalog, reviews, applications, reviewers, notifier)
    >>> result = await engine.assign(review.id)
    >>> if is_failure(result):
    ...     print(result.message)
"""

from __future__ import annotations

import asyncio
import random
from collections import defaultdict
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import structlog

from fulcrum.catalog.models import StageDefinition
from fulcrum.config import AssignmentConfig, EmailConfig
from fulcrum.database.models import Application, Review, Reviewer
from fulcrum.errors import Failure, FailureKind, is_failure
from fulcrum.grade_level import determine_grade_level
from fulcrum.notifications import templates
from fulcrum.ports import (
    ApplicationRepository,
    NotificationPort,
    ReviewerLookup,
    ReviewRepository,
    StageLookup,
)

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]

# Stage identifier -> Reviewer flag restricting that reviewer to first-year applicants
DEFAULT_FIRST_YEAR_RESTRICTIONS: dict[str, str] = {
    "developer_phone_screen": "only_first_year_phone_screen",
    "developer_technical": "only_first_year_technical",
}

SOLO_LOAD_MULTIPLIER = 2


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReviewAssignmentEngine:
    """Assigns reviewers to reviews and sends assignment notifications.

    The engine never creates reviews; it only sets and clears their
    reviewer.

    Attributes:
        catalog: Stage lookup.
        reviews: Review persistence.
        applications: Application persistence (block-list owner).
        reviewers: Directory of active reviewers.
        notifier: Outbound email transport.
    """

    def __init__(
        self,
        catalog: StageLookup,
        reviews: ReviewRepository,
        applications: ApplicationRepository,
        reviewers: ReviewerLookup,
        notifier: NotificationPort,
        *,
        email_config: EmailConfig | None = None,
        assignment_config: AssignmentConfig | None = None,
        rng: random.Random | None = None,
        clock: Clock | None = None,
        first_year_restrictions: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the assignment engine.

        Args:
            catalog: Stage lookup.
            reviews: Review persistence.
            applications: Application persistence.
            reviewers: Directory of active reviewers.
            notifier: Outbound email transport.
            email_config: Deployment URL used in review links.
            assignment_config: Deadline and notification blackout settings.
            rng: Random source for tie-breaking. Seed it for deterministic tests.
            clock: Returns the current aware datetime.
            first_year_restrictions: Stage identifier to Reviewer flag name.
        """
        self.catalog = catalog
        self.reviews = reviews
        self.applications = applications
        self.reviewers = reviewers
        self.notifier = notifier
        self.email_config = email_config or EmailConfig()
        self.assignment_config = assignment_config or AssignmentConfig()
        self.rng = rng or random.Random()
        self.clock = clock or utc_now
        self.first_year_restrictions = dict(
            DEFAULT_FIRST_YEAR_RESTRICTIONS
            if first_year_restrictions is None
            else first_year_restrictions
        )
        self._stage_locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._logger = logger.bind(component="ReviewAssignmentEngine")

    async def assign(
        self,
        review_id: UUID,
        reviewer_email: str | None = None,
    ) -> Review | Failure:
        """Assign a reviewer to a review.

        Args:
            review_id: Review to assign.
            reviewer_email: Reviewer to use directly. When None, a reviewer
                is auto-selected.

        Returns:
            The updated Review, or a Failure describing why no reviewer
            was assigned.
        """
        review = await self.reviews.get_by_id(review_id)
        if review is None:
            return Failure(FailureKind.REVIEW_NOT_FOUND, f"Review not found: {review_id}")

        stage = self.catalog.get_by_id(review.stage_id)
        if stage is None:
            return Failure(
                FailureKind.STAGE_NOT_FOUND,
                f"Stage {review.stage_id} not found for review {review_id}",
            )

        if reviewer_email is not None:
            reviewer = await self.reviewers.get_by_email(reviewer_email)
            if reviewer is None:
                return Failure(
                    FailureKind.REVIEWER_NOT_FOUND, f"Reviewer not found: {reviewer_email}"
                )
            review = await self._persist_assignment(review, reviewer.email)
        else:
            async with self._stage_locks[stage.id]:
                selected = await self.select_reviewer(stage, review.application_id)
                if is_failure(selected):
                    self._logger.warning(
                        "auto_assign_failed",
                        review_id=str(review_id),
                        stage=stage.identifier,
                        reason=selected.kind.value,
                    )
                    return selected
                review = await self._persist_assignment(review, selected.email)

        if stage.notify_reviewers_when_assigned:
            await self._notify_assigned(review, stage)

        return review

    async def auto_assign(self, review_id: UUID) -> Review | Failure:
        """Auto-assign a review that has no reviewer yet."""
        review = await self.reviews.get_by_id(review_id)
        if review is None:
            return Failure(FailureKind.REVIEW_NOT_FOUND, f"Review not found: {review_id}")
        if review.reviewer_email:
            return Failure(
                FailureKind.ALREADY_ASSIGNED, f"Already assigned to {review.reviewer_email}"
            )
        return await self.assign(review_id)

    async def reassign(self, review_id: UUID) -> Review | Failure:
        """Replace a review's reviewer with a newly auto-selected one.

        The current reviewer is block-listed for the application, so they
        are never auto-assigned to it again at any stage.
        """
        review = await self.reviews.get_by_id(review_id)
        if review is None:
            return Failure(FailureKind.REVIEW_NOT_FOUND, f"Review not found: {review_id}")

        application = await self.applications.get_by_id(review.application_id)
        if application is None:
            return Failure(
                FailureKind.APPLICATION_NOT_FOUND,
                f"Application not found: {review.application_id}",
            )

        previous = review.reviewer_email
        if previous:
            await self.applications.add_blocklisted_reviewer(application.id, previous)

        review.reviewer_email = None
        review = await self.reviews.save(review)

        self._logger.info(
            "review_unassigned",
            review_id=str(review_id),
            previous_reviewer=previous,
        )
        return await self.assign(review.id)

    async def select_reviewer(
        self, stage: StageDefinition, application_id: UUID
    ) -> Reviewer | Failure:
        """Choose the reviewer for a new slot of a stage.

        Read-only; callers that persist the result must hold the stage lock
        across selection and save.
        """
        pool = await self.reviewers.get_by_stage(stage.id)
        if not pool:
            return Failure(
                FailureKind.NO_REVIEWERS_CONFIGURED,
                f"Cannot auto-assign reviewer because stage has no reviewers: {stage.identifier}",
            )

        application = await self.applications.get_by_id(application_id)
        if application is not None:
            blocked = set(application.blocklisted_reviewer_emails or [])
            pool = [r for r in pool if r.email not in blocked]

        fresh = []
        for reviewer in pool:
            existing = await self.reviews.find_one(
                reviewer_email=reviewer.email, application_id=application_id
            )
            if existing is None:
                fresh.append(reviewer)
        if fresh:
            pool = fresh

        if application is not None:
            pool = self._apply_first_year_restriction(stage, application, pool)

        if not pool:
            return Failure(
                FailureKind.NO_AUTO_ASSIGN_CANDIDATE,
                f"No eligible reviewer left for {stage.identifier} on application {application_id}",
            )

        loads: list[tuple[int, Reviewer]] = []
        for reviewer in pool:
            count = await self.reviews.count_by_reviewer_and_stage(reviewer.email, stage.id)
            if reviewer.is_doing_interview_alone:
                count *= SOLO_LOAD_MULTIPLIER
            loads.append((count, reviewer))

        lowest = min(count for count, _ in loads)
        tied = [reviewer for count, reviewer in loads if count == lowest]
        chosen = self.rng.choice(tied)

        self._logger.debug(
            "reviewer_selected",
            stage=stage.identifier,
            application_id=str(application_id),
            reviewer_email=chosen.email,
            load=lowest,
            tied=len(tied),
        )
        return chosen

    def _apply_first_year_restriction(
        self,
        stage: StageDefinition,
        application: Application,
        pool: list[Reviewer],
    ) -> list[Reviewer]:
        flag = self.first_year_restrictions.get(stage.identifier)
        if flag is None:
            return pool

        grade_level = determine_grade_level(
            application.start_quarter,
            application.grad_quarter,
            self.clock().year,
        )
        is_first_year = grade_level == 1
        restricted = [r for r in pool if bool(getattr(r, flag)) == is_first_year]
        # An empty result means the roster is unbalanced; keep everyone.
        return restricted or pool

    def in_notification_blackout(self) -> bool:
        """True while assignment emails are held back before the deadline."""
        deadline = self.assignment_config.application_deadline
        if deadline is None:
            return False
        remaining = deadline - self.clock()
        return timedelta(0) <= remaining <= self.assignment_config.notification_blackout

    async def _persist_assignment(self, review: Review, reviewer_email: str) -> Review:
        review.reviewer_email = reviewer_email
        review = await self.reviews.save(review)
        self._logger.info(
            "review_assigned",
            review_id=str(review.id),
            stage_id=review.stage_id,
            application_id=str(review.application_id),
            reviewer_email=reviewer_email,
        )
        return review

    async def _notify_assigned(self, review: Review, stage: StageDefinition) -> None:
        if self.in_notification_blackout():
            self._logger.info(
                "assignment_notification_suppressed",
                review_id=str(review.id),
                reviewer_email=review.reviewer_email,
            )
            return

        application = await self.applications.get_by_id(review.application_id)
        message = templates.review_assigned(
            review.reviewer_email,
            review_id=str(review.id),
            stage_name=stage.name,
            applicant_name=application.name if application else str(review.application_id),
            deployment_url=self.email_config.deployment_url,
        )

        try:
            sent = await self.notifier.send(message.recipient, message.subject, message.body)
        except Exception as e:
            self._logger.error(
                "assignment_notification_error",
                review_id=str(review.id),
                reviewer_email=review.reviewer_email,
                error=str(e),
            )
            return

        if not sent:
            self._logger.warning(
                "assignment_notification_failed",
                review_id=str(review.id),
                reviewer_email=review.reviewer_email,
            )
