"""Bearer-token authentication and role checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from eduwise_auth import ExpiredTokenError, InvalidTokenError, JWTService
from eduwise_identity.domain.user import User, UserRole
from eduwise_identity.exceptions import (
    ForbiddenError,
    TokenExpiredError,
    TokenUserNotFoundError,
    UnauthenticatedError,
)

if TYPE_CHECKING:
    from eduwise_identity.domain.user import UserRepository

logger = logging.getLogger(__name__)


class AccessControlService:
    """Resolve access tokens to users and enforce role sets.

    An expired token is reported separately from an invalid one so the
    client knows a refresh is worth trying.
    """

    def __init__(self, user_repository: UserRepository, jwt_service: JWTService):
        self._user_repo = user_repository
        self._jwt_service = jwt_service

    async def authenticate(self, token: Optional[str]) -> User:
        """Return the user an access token belongs to.

        Raises
        ------
        UnauthenticatedError
            If the token is absent, malformed, badly signed or not an
            access token
        TokenExpiredError
            If the token has expired
        TokenUserNotFoundError
            If the token names a user that no longer exists
        """
        if not token:
            raise UnauthenticatedError

        try:
            payload = self._jwt_service.verify_access_token(token)
        except ExpiredTokenError as e:
            msg = "Access token has expired"
            raise TokenExpiredError(msg) from e
        except InvalidTokenError as e:
            logger.warning("Invalid access token: %s", e.message)
            raise UnauthenticatedError from e

        user = await self._user_repo.find_by_id(payload.user_id)
        if user is None:
            logger.warning("User not found for token: %s", payload.user_id)
            raise TokenUserNotFoundError(str(payload.user_id))

        return user

    async def optional_authenticate(self, token: Optional[str]) -> Optional[User]:
        """Like ``authenticate`` but returns None instead of raising."""
        if not token:
            return None
        try:
            return await self.authenticate(token)
        except (UnauthenticatedError, TokenExpiredError, TokenUserNotFoundError):
            return None

    @staticmethod
    def authorize_roles(user: User, allowed: Iterable[UserRole]) -> User:
        """Return ``user`` if its role is in ``allowed``.

        Raises
        ------
        ForbiddenError
            If the role is not allowed
        """
        allowed_roles = set(allowed)
        if user.role not in allowed_roles:
            raise ForbiddenError(
                user.role.value,
                sorted(role.value for role in allowed_roles),
            )
        return user
