"""Application layer ports (aka interfaces)."""

from eduwise_identity.application.ports.email_dispatcher import EmailDispatcher

__all__ = [
    "EmailDispatcher",
]
