"""Auth schemas and data structures.

These are simple data classes used for transferring token data
between components.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

ACCESS_TOKEN_TYPE = "access"  # NOQA: S105
REFRESH_TOKEN_TYPE = "refresh"  # NOQA: S105


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    Attributes
    ----------
    user_id
        The unique identifier of the user
    exp
        Token expiration timestamp
    token_type
        Either "access" or "refresh"
    jti
        Unique token identifier
    """

    user_id: UUID
    exp: datetime
    token_type: str
    jti: str


@dataclass(frozen=True)
class TokenPair:
    """A freshly issued access/refresh token pair."""

    access_token: str
    refresh_token: str
    access_expires_in: int  # seconds


@dataclass(frozen=True)
class OpaqueToken:
    """A random token and the hash that is stored server-side.

    Only ``token_hash`` may be persisted; ``plaintext`` goes to the user.
    """

    plaintext: str
    token_hash: str

    def __repr__(self) -> str:
        return f"OpaqueToken(token_hash={self.token_hash!r})"
