"""Email delivery infrastructure."""

from eduwise_identity.infrastructure.email.smtp_email_dispatcher import (
    SmtpEmailDispatcher,
)

__all__ = ["SmtpEmailDispatcher"]
