"""Outbound notifications for Fulcrum.

Public API:
    LogEmailSender: Transport used when email delivery is disabled.
    WebhookEmailSender: Transport that POSTs messages to a mail relay.
    create_email_sender: Build the transport selected by EmailConfig.
    EmailMessage: Message value produced by the template builders.
"""

from fulcrum.notifications.email import LogEmailSender, WebhookEmailSender, create_email_sender
from fulcrum.notifications.templates import (
    EmailMessage,
    application_received,
    application_rejected,
    review_assigned,
)

__all__ = [
    "LogEmailSender",
    "WebhookEmailSender",
    "create_email_sender",
    "EmailMessage",
    "application_received",
    "application_rejected",
    "review_assigned",
]
