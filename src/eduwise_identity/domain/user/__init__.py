"""User domain manages identity for the platform.

This domain handles:
- User aggregate (identity, password hash, role, verification state)
- Pending verification and reset tokens
- Refresh token bookkeeping and login streaks
"""

from eduwise_identity.domain.user.aggregates import User
from eduwise_identity.domain.user.repositories import UserRepository
from eduwise_identity.domain.user.services import next_login_streak
from eduwise_identity.domain.user.value_objects import (
    Email,
    PendingToken,
    UserRole,
)

__all__ = [
    "Email",
    "PendingToken",
    "User",
    "UserRepository",
    "UserRole",
    "next_login_streak",
]
