"""Pending one-time token value object."""

from dataclasses import dataclass
from datetime import datetime

from eduwise.domain.shared.time import ensure_tz_aware, utc_now


@dataclass(frozen=True)
class PendingToken:
    """Hash of an outstanding verification or reset token plus its expiry.

    Holding both halves in one value means a user either has a complete
    pending token or none at all.
    """

    token_hash: str
    expires_at: datetime

    def __post_init__(self) -> None:
        if not self.token_hash:
            msg = "token_hash cannot be empty"
            raise ValueError(msg)
        object.__setattr__(self, "expires_at", ensure_tz_aware(self.expires_at))

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) >= self.expires_at

    def __repr__(self) -> str:
        return f"PendingToken(expires_at={self.expires_at.isoformat()})"
