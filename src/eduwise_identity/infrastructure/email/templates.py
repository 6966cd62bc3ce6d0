# ruff: noqa: E501 - inline-styled HTML
"""Email templates for the identity lifecycle."""

import html
import re

VERIFICATION_SUBJECT = "Verify your email - EduWise"
PASSWORD_RESET_SUBJECT = "Password Reset Request - EduWise"

_LAYOUT = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px; box-shadow: 0 1px 3px rgba(0,0,0,0.1);">
        <h2 style="color: #111827; margin-top: 0;">{title}</h2>
        <p style="color: #374151; line-height: 1.6;">Hello {name},</p>
        <p style="color: #374151; line-height: 1.6;">{intro}</p>
        <p style="margin: 30px 0; text-align: center;">
            <a href="{link}" style="display: inline-block; padding: 14px 28px; background-color: #2563eb; color: #ffffff !important; text-decoration: none; border-radius: 6px; font-weight: 600; font-size: 16px;">{action}</a>
        </p>
        <p style="color: #6b7280; font-size: 14px;">Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #2563eb; font-size: 14px;">{link}</p>
        <div style="margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb;">
            <p style="color: #9ca3af; font-size: 13px; margin: 0;">{footer}</p>
            <p style="color: #9ca3af; font-size: 13px; margin-top: 8px;">EduWise</p>
        </div>
    </div>
</body>
</html>
"""


def _hours(hours: int) -> str:
    return "1 hour" if hours == 1 else f"{hours} hours"


def verification_email(full_name: str, link: str, valid_hours: int) -> str:
    return _LAYOUT.format(
        title="Welcome to EduWise",
        name=html.escape(full_name),
        intro=(
            "Thanks for signing up. Please confirm your email address. "
            f"This link is valid for {_hours(valid_hours)}."
        ),
        action="Verify Email",
        link=html.escape(link, quote=True),
        footer="If you didn't create an account, you can safely ignore this email.",
    )


def password_reset_email(full_name: str, link: str, valid_hours: int) -> str:
    return _LAYOUT.format(
        title="Password Reset Request",
        name=html.escape(full_name),
        intro=(
            "You requested a password reset for your EduWise account. "
            f"This link is valid for {_hours(valid_hours)}."
        ),
        action="Reset Password",
        link=html.escape(link, quote=True),
        footer="If you didn't request this, you can safely ignore this email.",
    )


_TAG = re.compile(r"<[^>]+>")
_HEAD = re.compile(r"<head>.*?</head>", re.DOTALL | re.IGNORECASE)
_BLANK_LINES = re.compile(r"\n\s*\n+")


def html_to_text(html_body: str) -> str:
    """Plain-text alternative for clients that do not render HTML."""
    text = _TAG.sub("", _HEAD.sub("", html_body))
    text = html.unescape(text)
    lines = [line.strip() for line in text.splitlines()]
    return _BLANK_LINES.sub("\n\n", "\n".join(lines)).strip() + "\n"
