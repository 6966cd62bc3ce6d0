"""Unit tests for AccessControlService."""

from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from eduwise_auth import JWTService
from eduwise_identity import (
    AccessControlService,
    ForbiddenError,
    TokenExpiredError,
    TokenUserNotFoundError,
    UnauthenticatedError,
    UserRepository,
    UserRole,
)


class TestAuthenticate:
    def setup_method(self):
        self.user_repo = AsyncMock(spec=UserRepository)
        self.user_repo.find_by_id.return_value = None
        self.jwt_service = JWTService(access_secret="a" * 40, refresh_secret="b" * 40)
        self.service = AccessControlService(self.user_repo, self.jwt_service)

    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, token):
        with pytest.raises(UnauthenticatedError):
            await self.service.authenticate(token)

    async def test_malformed_token(self):
        with pytest.raises(UnauthenticatedError):
            await self.service.authenticate("abc.def.ghi")

    async def test_refresh_token_not_accepted(self, test_user):
        token = self.jwt_service.create_refresh_token(test_user.id)
        with pytest.raises(UnauthenticatedError):
            await self.service.authenticate(token)

    async def test_expired_token_distinguished(self, test_user):
        token = self.jwt_service.create_access_token(
            test_user.id,
            timedelta(seconds=-1),
        )
        with pytest.raises(TokenExpiredError) as exc_info:
            await self.service.authenticate(token)
        assert exc_info.value.details["expired"] is True

    async def test_deleted_user(self):
        token = self.jwt_service.create_access_token(uuid4())
        with pytest.raises(TokenUserNotFoundError):
            await self.service.authenticate(token)

    async def test_resolves_user(self, test_user):
        self.user_repo.find_by_id.return_value = test_user
        token = self.jwt_service.create_access_token(test_user.id)

        assert await self.service.authenticate(token) is test_user
        self.user_repo.find_by_id.assert_awaited_once_with(test_user.id)

    async def test_optional_authenticate_never_raises(self, test_user):
        assert await self.service.optional_authenticate(None) is None
        assert await self.service.optional_authenticate("garbage") is None

        self.user_repo.find_by_id.return_value = test_user
        token = self.jwt_service.create_access_token(test_user.id)
        assert await self.service.optional_authenticate(token) is test_user


class TestAuthorizeRoles:
    def test_allowed_role_passes(self, admin_user):
        assert AccessControlService.authorize_roles(admin_user, [UserRole.ADMIN])

    def test_staff_set(self, instructor_user):
        allowed = (UserRole.ADMIN, UserRole.INSTRUCTOR)
        assert AccessControlService.authorize_roles(instructor_user, allowed)

    def test_learner_forbidden(self, test_user):
        with pytest.raises(ForbiddenError) as exc_info:
            AccessControlService.authorize_roles(
                test_user,
                (UserRole.ADMIN, UserRole.INSTRUCTOR),
            )
        assert exc_info.value.details["allowed"] == ["admin", "instructor"]
