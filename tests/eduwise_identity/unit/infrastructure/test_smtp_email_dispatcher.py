"""Unit tests for SmtpEmailDispatcher with smtplib patched out."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from eduwise_config import Settings
from eduwise_identity import EmailDeliveryError
from eduwise_identity.infrastructure.email import SmtpEmailDispatcher
from eduwise_identity.infrastructure.email.templates import (
    html_to_text,
    verification_email,
)

MODULE = "eduwise_identity.infrastructure.email.smtp_email_dispatcher"


def _settings(**overrides) -> Settings:
    values = {
        "jwt_access_secret": "a" * 40,
        "jwt_refresh_secret": "b" * 40,
        "postgres_password": "pw",
        "smtp_enabled": True,
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "smtp_user": "mailer",
        "smtp_password": "secret",
        "smtp_from_email": "noreply@example.com",
        "smtp_starttls": True,
    }
    values.update(overrides)
    return Settings(**values)


async def test_disabled_only_logs():
    dispatcher = SmtpEmailDispatcher(_settings(smtp_enabled=False))

    with patch(f"{MODULE}.smtplib.SMTP") as smtp:
        await dispatcher.send("a@b.io", "Subject", "<p>Hi</p>")

    smtp.assert_not_called()


async def test_missing_host_fails():
    dispatcher = SmtpEmailDispatcher(_settings(smtp_host=""))

    with pytest.raises(EmailDeliveryError):
        await dispatcher.send("a@b.io", "Subject", "<p>Hi</p>")


async def test_starttls_sends_multipart_message():
    dispatcher = SmtpEmailDispatcher(_settings())
    server = MagicMock()

    with patch(f"{MODULE}.smtplib.SMTP") as smtp:
        smtp.return_value.__enter__.return_value = server
        await dispatcher.send("a@b.io", "Subject", "<p>Hi</p>")

    smtp.assert_called_once_with("smtp.example.com", 587)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("mailer", "secret")
    message = server.send_message.call_args.args[0]
    assert message["To"] == "a@b.io"
    assert message["From"] == "EduWise <noreply@example.com>"
    assert [part.get_content_type() for part in message.get_payload()] == [
        "text/plain",
        "text/html",
    ]


async def test_implicit_tls_uses_smtp_ssl():
    dispatcher = SmtpEmailDispatcher(_settings(smtp_port=465, smtp_starttls=False))

    with patch(f"{MODULE}.smtplib.SMTP_SSL") as smtp_ssl:
        await dispatcher.send("a@b.io", "Subject", "<p>Hi</p>")

    assert smtp_ssl.call_args.args == ("smtp.example.com", 465)


async def test_smtp_error_becomes_delivery_error():
    dispatcher = SmtpEmailDispatcher(_settings())

    with patch(f"{MODULE}.smtplib.SMTP") as smtp:
        smtp.side_effect = smtplib.SMTPConnectError(421, "try later")
        with pytest.raises(EmailDeliveryError) as exc_info:
            await dispatcher.send("a@b.io", "Subject", "<p>Hi</p>")

    assert "try later" in exc_info.value.reason


def test_plain_text_alternative_keeps_link():
    body = verification_email("Ada <b>", "https://x.io/verify/abc", 24)
    text = html_to_text(body)

    assert "https://x.io/verify/abc" in text
    assert "<" not in text.replace("Ada <b>", "")
    assert "24 hours" in text
    assert "Ada &lt;b&gt;" in body
