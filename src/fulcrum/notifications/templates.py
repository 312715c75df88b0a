"""Outgoing email messages.

Builders return an :class:`EmailMessage`; transports append the configured
footer when sending.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EmailMessage:
    """A plain-text email ready to hand to a transport."""

    recipient: str
    subject: str
    body: str


def review_assigned(
    recipient: str,
    *,
    review_id: str,
    stage_name: str,
    applicant_name: str,
    deployment_url: str,
) -> EmailMessage:
    """Link a reviewer to the edit page of a review they were assigned."""
    return EmailMessage(
        recipient=recipient,
        subject=f"{stage_name} for {applicant_name}",
        body=f"{deployment_url}/review/{review_id}/edit",
    )


def application_rejected(
    recipient: str,
    *,
    applicant_name: str,
    pipeline_name: str,
    organization_name: str,
) -> EmailMessage:
    """Tell an applicant they will not be offered a role in one pipeline."""
    paragraphs = [
        f"Dear {applicant_name},",
        (
            f"Thank you for your interest in {organization_name}. Unfortunately, we cannot "
            f"offer you a {pipeline_name} position in our organization at this time. If you "
            "applied for other roles, you will hear back separately for each role."
        ),
        (
            "Our team was impressed by your skills and accomplishments, and we invite you to "
            "apply again next year as our organization grows and more spots open up."
        ),
        "We wish you the best for your future professional and collegiate endeavors.",
        "Regards,",
        f"The {organization_name} Team",
    ]
    return EmailMessage(
        recipient=recipient,
        subject=f"{organization_name} - {pipeline_name} Application Update",
        body="\n\n".join(paragraphs),
    )


def application_received(
    recipient: str,
    *,
    applicant_name: str,
    organization_name: str,
) -> EmailMessage:
    """Confirm receipt of a submitted application."""
    paragraphs = [
        f"Dear {applicant_name},",
        (
            f"Thank you for your interest in {organization_name}! This email confirms that "
            "we have received your application."
        ),
    ]
    return EmailMessage(
        recipient=recipient,
        subject=f"{organization_name} Application Confirmation",
        body="\n\n".join(paragraphs),
    )
