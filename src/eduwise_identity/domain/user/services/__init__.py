from eduwise_identity.domain.user.services.login_streak import (
    STREAK_WINDOW,
    next_login_streak,
)

__all__ = [
    "STREAK_WINDOW",
    "next_login_streak",
]
