"""Email transports.

Two transports implement the notification port:

- :class:`LogEmailSender` writes messages to the log and reports success.
  It is used whenever email delivery is disabled (development, tests).
- :class:`WebhookEmailSender` POSTs each message as JSON to a mail relay
  webhook, which performs the actual SMTP delivery.

Neither transport raises on delivery failure; they return False and log the
reason.

Example:
    >>> sender = create_email_sender(config.email)
    >>> ok = await sender.send("reviewer@example.com", "Subject", "Body")
"""

from __future__ import annotations

import httpx

from fulcrum.config import EmailConfig
from fulcrum.logging import get_logger

logger = get_logger(__name__)


def _with_footer(body: str, footer: str) -> str:
    body = body.strip()
    if not footer:
        return body
    return f"{body}\n\n{footer}"


class LogEmailSender:
    """Transport that only logs outgoing messages."""

    def __init__(self, footer: str = "") -> None:
        self.footer = footer
        self.logger = get_logger(__name__)

    async def send(self, recipient: str, subject: str, body: str) -> bool:
        self.logger.info(
            "email_logged",
            recipient=recipient,
            subject=subject,
            body=_with_footer(body, self.footer),
        )
        return True


class WebhookEmailSender:
    """Transport that hands messages to a mail relay over HTTP."""

    def __init__(self, config: EmailConfig) -> None:
        if not config.webhook_url:
            raise ValueError("webhook_url is required to send email through the relay")
        self.config = config
        self.logger = get_logger(__name__)
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def send(self, recipient: str, subject: str, body: str) -> bool:
        """Send one message through the relay.

        Returns True if the relay accepted the message, False otherwise.
        """
        payload = {
            "recipient": recipient,
            "subject": subject,
            "body": _with_footer(body, self.config.footer),
        }
        headers = {"Content-Type": "application/json"}
        if self.config.auth_header:
            headers["Authorization"] = self.config.auth_header

        try:
            client = await self._get_client()
            response = await client.post(
                self.config.webhook_url,
                json=payload,
                headers=headers,
            )
        except httpx.RequestError as e:
            self.logger.error(
                "email_send_error",
                recipient=recipient,
                subject=subject,
                error=str(e),
            )
            return False

        if response.is_success:
            self.logger.info(
                "email_sent",
                recipient=recipient,
                subject=subject,
                status_code=response.status_code,
            )
            return True

        self.logger.warning(
            "email_send_failed",
            recipient=recipient,
            subject=subject,
            status_code=response.status_code,
            response_text=response.text[:200],
        )
        return False


def create_email_sender(config: EmailConfig) -> LogEmailSender | WebhookEmailSender:
    """Pick the transport matching the email configuration."""
    if config.enabled:
        return WebhookEmailSender(config)
    return LogEmailSender(footer=config.footer)
