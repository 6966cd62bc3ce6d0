"""JWT token service.

Provides signed access/refresh token creation and verification.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import jwt

from eduwise_auth.exceptions import ExpiredTokenError, InvalidTokenError
from eduwise_auth.schemas import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenPair,
    TokenPayload,
)


class JWTService:
    """Service for JWT token creation and verification.

    Access tokens (short-lived) and refresh tokens (long-lived) are signed
    with two distinct secrets, so a token of one kind can never verify as
    the other.

    Examples
    --------
    >>> service = JWTService(access_secret="a" * 32, refresh_secret="b" * 32)
    >>> pair = service.create_token_pair(user_id)
    >>> payload = service.verify_access_token(pair.access_token)
    >>> print(payload.user_id)
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 15
    DEFAULT_REFRESH_EXPIRE_DAYS = 7
    ALGORITHM = "HS256"

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        access_secret
            Secret key for signing access tokens.
        refresh_secret
            Secret key for signing refresh tokens. Must differ from
            ``access_secret``.
        access_token_expire_minutes
            Minutes until an access token expires (default 15)
        refresh_token_expire_days
            Days until a refresh token expires (default 7)
        """
        if not access_secret or not refresh_secret:
            msg = "JWT secret keys cannot be empty"
            raise ValueError(msg)
        if access_secret == refresh_secret:
            msg = "Access and refresh tokens must be signed with different secrets"
            raise ValueError(msg)

        self._secrets = {
            ACCESS_TOKEN_TYPE: access_secret,
            REFRESH_TOKEN_TYPE: refresh_secret,
        }
        self._access_expire = timedelta(minutes=access_token_expire_minutes)
        self._refresh_expire = timedelta(days=refresh_token_expire_days)

    @property
    def access_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return int(self._access_expire.total_seconds())

    def create_access_token(
        self,
        user_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> str:
        return self._create_token(
            user_id=user_id,
            token_type=ACCESS_TOKEN_TYPE,
            expires_delta=expires_delta or self._access_expire,
        )

    def create_refresh_token(
        self,
        user_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> str:
        return self._create_token(
            user_id=user_id,
            token_type=REFRESH_TOKEN_TYPE,
            expires_delta=expires_delta or self._refresh_expire,
        )

    def create_token_pair(self, user_id: UUID) -> TokenPair:
        """Issue a new access/refresh token pair bound to ``user_id``."""
        return TokenPair(
            access_token=self.create_access_token(user_id),
            refresh_token=self.create_refresh_token(user_id),
            access_expires_in=self.access_expires_in,
        )

    def verify_access_token(self, token: str) -> TokenPayload:
        """Verify an access token.

        Raises
        ------
        ExpiredTokenError
            If the token is well-formed and signed but past its expiry
        InvalidTokenError
            If the token is malformed, tampered with, or not an access token
        """
        return self._verify(token, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        """Verify a refresh token.

        Raises
        ------
        ExpiredTokenError
            If the token is well-formed and signed but past its expiry
        InvalidTokenError
            If the token is malformed, tampered with, or not a refresh token
        """
        return self._verify(token, REFRESH_TOKEN_TYPE)

    def _verify(self, token: str, expected_type: str) -> TokenPayload:
        try:
            payload = jwt.decode(
                token,
                self._secrets[expected_type],
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "exp", "type"]},
            )

            token_payload = TokenPayload(
                user_id=UUID(payload["sub"]),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                token_type=payload["type"],
                jti=payload.get("jti", ""),
            )

        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, ValueError, TypeError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e

        if token_payload.token_type != expected_type:
            msg = f"Expected a {expected_type} token"
            raise InvalidTokenError(msg)

        return token_payload

    def _create_token(
        self,
        user_id: UUID,
        token_type: str,
        expires_delta: timedelta,
    ) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "sub": str(user_id),
            "type": token_type,
            "jti": uuid4().hex,
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(payload, self._secrets[token_type], algorithm=self.ALGORITHM)
