"""Value objects for the user domain."""

from eduwise_identity.domain.user.value_objects.email import Email
from eduwise_identity.domain.user.value_objects.pending_token import PendingToken
from eduwise_identity.domain.user.value_objects.user_role import UserRole

__all__ = [
    "Email",
    "PendingToken",
    "UserRole",
]
