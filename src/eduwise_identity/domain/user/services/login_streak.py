"""Login streak bookkeeping."""

from datetime import datetime, timedelta
from typing import Optional

from eduwise.domain.shared.time import ensure_tz_aware

STREAK_WINDOW = timedelta(hours=24)


def next_login_streak(
    streak: int,
    last_login_at: Optional[datetime],
    now: datetime,
) -> int:
    """Return the streak value after a successful login at ``now``.

    This is a rolling 24 hour window, not calendar-day tracking: a login
    at most 24 hours after the previous one continues the streak, anything
    later starts over at 1.

    Parameters
    ----------
    streak
        Current streak counter
    last_login_at
        Time of the previous successful login, or None for a first login
    now
        Time of the login being recorded

    Returns
    -------
    The new streak counter (always >= 1)
    """
    if last_login_at is None:
        return 1
    elapsed = ensure_tz_aware(now) - ensure_tz_aware(last_login_at)
    if elapsed <= STREAK_WINDOW:
        return max(streak, 0) + 1
    return 1
