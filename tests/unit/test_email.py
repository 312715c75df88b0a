"""Tests for email templates and transports."""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from fulcrum.config import EmailConfig
from fulcrum.notifications import (
    LogEmailSender,
    WebhookEmailSender,
    application_received,
    application_rejected,
    create_email_sender,
    review_assigned,
)

RELAY_URL = "https://relay.example.org/hooks/email"


def _relay_config(**overrides) -> EmailConfig:
    values = {"enabled": True, "webhook_url": RELAY_URL, "footer": "Do not reply."}
    values.update(overrides)
    return EmailConfig(**values)


def test_review_assigned_message() -> None:
    message = review_assigned(
        "rev@example.org",
        review_id="abc",
        stage_name="Technical Interview",
        applicant_name="Ada",
        deployment_url="https://apply.example.org",
    )

    assert message.recipient == "rev@example.org"
    assert message.subject == "Technical Interview for Ada"
    assert message.body == "https://apply.example.org/review/abc/edit"


def test_application_rejected_message() -> None:
    message = application_rejected(
        "ada@example.org",
        applicant_name="Ada",
        pipeline_name="Developer",
        organization_name="TSE",
    )

    assert message.subject == "TSE - Developer Application Update"
    assert message.body.startswith("Dear Ada,")
    assert "offer you a Developer position" in message.body
    assert message.body.endswith("The TSE Team")


def test_application_received_message() -> None:
    message = application_received("ada@example.org", applicant_name="Ada", organization_name="TSE")

    assert message.subject == "TSE Application Confirmation"
    assert "received your application" in message.body


@pytest.mark.asyncio
async def test_log_sender_always_succeeds() -> None:
    sender = LogEmailSender(footer="Footer")

    assert await sender.send("a@example.org", "Subject", "Body") is True


def test_deployment_url_trailing_slash_stripped() -> None:
    assert EmailConfig(deployment_url="https://apply.example.org/").deployment_url == (
        "https://apply.example.org"
    )


def test_create_sender_disabled_uses_log() -> None:
    assert isinstance(create_email_sender(EmailConfig(enabled=False)), LogEmailSender)


def test_create_sender_enabled_uses_relay() -> None:
    assert isinstance(create_email_sender(_relay_config()), WebhookEmailSender)


def test_relay_requires_url() -> None:
    with pytest.raises(ValueError, match="webhook_url"):
        WebhookEmailSender(EmailConfig(enabled=True))


@respx.mock
@pytest.mark.asyncio
async def test_relay_send_success() -> None:
    route = respx.post(RELAY_URL).mock(return_value=httpx.Response(200))
    sender = WebhookEmailSender(_relay_config())

    result = await sender.send("a@example.org", "Hello", "Body text")

    assert result is True
    assert route.called
    payload = json.loads(route.calls.last.request.content)
    assert payload == {
        "recipient": "a@example.org",
        "subject": "Hello",
        "body": "Body text\n\nDo not reply.",
    }
    assert "authorization" not in route.calls.last.request.headers

    await sender.close()


@respx.mock
@pytest.mark.asyncio
async def test_relay_sends_auth_header() -> None:
    route = respx.post(RELAY_URL).mock(return_value=httpx.Response(202))
    sender = WebhookEmailSender(_relay_config(auth_header="Bearer secret"))

    assert await sender.send("a@example.org", "Hello", "Body") is True
    assert route.calls.last.request.headers["authorization"] == "Bearer secret"

    await sender.close()


@respx.mock
@pytest.mark.asyncio
async def test_relay_send_without_footer() -> None:
    route = respx.post(RELAY_URL).mock(return_value=httpx.Response(200))
    sender = WebhookEmailSender(_relay_config(footer=""))

    await sender.send("a@example.org", "Hello", "  Body  ")

    assert json.loads(route.calls.last.request.content)["body"] == "Body"

    await sender.close()


@respx.mock
@pytest.mark.asyncio
async def test_relay_send_http_error() -> None:
    respx.post(RELAY_URL).mock(return_value=httpx.Response(500, text="boom"))
    sender = WebhookEmailSender(_relay_config())

    assert await sender.send("a@example.org", "Hello", "Body") is False

    await sender.close()


@respx.mock
@pytest.mark.asyncio
async def test_relay_send_connection_error() -> None:
    respx.post(RELAY_URL).mock(side_effect=httpx.ConnectError("Connection refused"))
    sender = WebhookEmailSender(_relay_config())

    assert await sender.send("a@example.org", "Hello", "Body") is False

    await sender.close()


@pytest.mark.asyncio
async def test_relay_close_is_idempotent() -> None:
    sender = WebhookEmailSender(_relay_config())

    await sender.close()
    await sender.close()

    assert sender._client is None
