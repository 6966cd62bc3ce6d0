"""SQLAlchemy implementation of UserRepository."""

import logging
from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eduwise.domain.shared.time import ensure_tz_aware
from eduwise_identity.domain.user import (
    Email,
    PendingToken,
    User,
    UserRepository,
    UserRole,
)
from eduwise_identity.exceptions import DuplicateEmailError
from eduwise_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface.

    The conditional updates bypass the identity map, so every read uses
    ``populate_existing`` to see their effect within the same session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self._find_model_by_id(user_id)
        if model is None:
            return None
        return self._map_to_domain(model)

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        email_value = email.value if isinstance(email, Email) else Email(email).value
        stmt = self._select().where(UserModel.email == email_value)
        return await self._find_one(stmt)

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        user = await self.find_by_email(email)
        return user is not None

    async def find_by_email_verification_hash(self, token_hash: str) -> User | None:
        stmt = self._select().where(
            UserModel.email_verification_token_hash == token_hash,
        )
        return await self._find_one(stmt)

    async def find_by_password_reset_hash(self, token_hash: str) -> User | None:
        stmt = self._select().where(UserModel.password_reset_token_hash == token_hash)
        return await self._find_one(stmt)

    async def save(self, user: User) -> None:
        existing = await self._find_model_by_id(user.id)

        try:
            if existing:
                self._update_account(existing, user)
                logger.debug("Updated user: %s", user.id)
            else:
                model = self._map_to_model(user)
                self._session.add(model)
                logger.info("Created user: %s (email: %s)", user.id, user.email)

            await self._session.flush()
        except IntegrityError as e:
            if "UNIQUE constraint failed" in str(e) or "unique" in str(e).lower():
                raise DuplicateEmailError(user.email) from e
            raise

    async def delete(self, user_id: UUID) -> None:
        model = await self._find_model_by_id(user_id)

        if model:
            await self._session.delete(model)
            await self._session.flush()
            logger.info("Deleted user: %s", user_id)

    async def list_all(self, role: Optional[UserRole] = None) -> list[User]:
        stmt = self._select().order_by(UserModel.created_at.desc())
        if role is not None:
            stmt = stmt.where(UserModel.role == role.value)
        result = await self._session.execute(stmt)
        models = result.scalars().all()
        return [self._map_to_domain(model) for model in models]

    # Targeted lifecycle updates

    async def reissue_email_verification(self, user: User) -> bool:
        pending = user.email_verification
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id, UserModel.email_verified.is_(False))
            .values(
                email_verification_token_hash=pending.token_hash if pending else None,
                email_verification_expires_at=pending.expires_at if pending else None,
            )
        )
        return await self._execute_conditional(stmt)

    async def record_login(self, user: User) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(
                login_streak=user.login_streak,
                last_login_at=user.last_login_at,
                refresh_token=user.refresh_token,
            )
        )
        await self._execute_conditional(stmt)

    async def set_password_reset(self, user: User) -> None:
        pending = user.password_reset
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(
                password_reset_token_hash=pending.token_hash if pending else None,
                password_reset_expires_at=pending.expires_at if pending else None,
            )
        )
        await self._execute_conditional(stmt)

    # Conditional updates

    async def consume_email_verification(
        self,
        user_id: UUID,
        token_hash: str,
        now: datetime,
    ) -> bool:
        stmt = (
            update(UserModel)
            .where(
                UserModel.id == user_id,
                UserModel.email_verification_token_hash == token_hash,
                UserModel.email_verification_expires_at > now,
            )
            .values(
                email_verified=True,
                email_verification_token_hash=None,
                email_verification_expires_at=None,
            )
        )
        return await self._execute_conditional(stmt)

    async def consume_password_reset(
        self,
        user_id: UUID,
        token_hash: str,
        new_password_hash: str,
        now: datetime,
    ) -> bool:
        stmt = (
            update(UserModel)
            .where(
                UserModel.id == user_id,
                UserModel.password_reset_token_hash == token_hash,
                UserModel.password_reset_expires_at > now,
            )
            .values(
                password_hash=new_password_hash,
                password_reset_token_hash=None,
                password_reset_expires_at=None,
            )
        )
        return await self._execute_conditional(stmt)

    async def clear_email_verification(
        self,
        user_id: UUID,
        token_hash: str,
    ) -> None:
        stmt = (
            update(UserModel)
            .where(
                UserModel.id == user_id,
                UserModel.email_verification_token_hash == token_hash,
            )
            .values(
                email_verification_token_hash=None,
                email_verification_expires_at=None,
            )
        )
        if await self._execute_conditional(stmt):
            logger.info("Cleared verification token for user: %s", user_id)

    async def clear_password_reset(
        self,
        user_id: UUID,
        token_hash: str,
    ) -> None:
        stmt = (
            update(UserModel)
            .where(
                UserModel.id == user_id,
                UserModel.password_reset_token_hash == token_hash,
            )
            .values(
                password_reset_token_hash=None,
                password_reset_expires_at=None,
            )
        )
        if await self._execute_conditional(stmt):
            logger.info("Cleared password reset token for user: %s", user_id)

    async def rotate_refresh_token(
        self,
        user_id: UUID,
        expected: str,
        replacement: str,
    ) -> bool:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id, UserModel.refresh_token == expected)
            .values(refresh_token=replacement)
        )
        return await self._execute_conditional(stmt)

    async def clear_refresh_token(self, user_id: UUID) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(refresh_token=None)
        )
        await self._execute_conditional(stmt)

    # Helpers

    @staticmethod
    def _select() -> Select:
        return select(UserModel).execution_options(populate_existing=True)

    async def _execute_conditional(self, stmt) -> bool:
        result = await self._session.execute(
            stmt.execution_options(synchronize_session=False),
        )
        return result.rowcount == 1

    async def _find_one(self, stmt: Select) -> User | None:
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return self._map_to_domain(model)

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = self._select().where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _pending(
        token_hash: Optional[str],
        expires_at: Optional[datetime],
    ) -> Optional[PendingToken]:
        if token_hash is None or expires_at is None:
            return None
        return PendingToken(token_hash, ensure_tz_aware(expires_at))

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            email=model.email,
            full_name=model.full_name,
            password_hash=model.password_hash,
            role=model.role,
            email_verified=model.email_verified,
            email_verification=self._pending(
                model.email_verification_token_hash,
                model.email_verification_expires_at,
            ),
            password_reset=self._pending(
                model.password_reset_token_hash,
                model.password_reset_expires_at,
            ),
            refresh_token=model.refresh_token,
            login_streak=model.login_streak,
            last_login_at=model.last_login_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _map_to_model(self, user: User) -> UserModel:
        verification = user.email_verification
        reset = user.password_reset
        model = UserModel(id=user.id, created_at=user.created_at)
        self._update_account(model, user)
        model.password_hash = user.password_hash
        model.email_verified = user.email_verified
        model.email_verification_token_hash = (
            verification.token_hash if verification else None
        )
        model.email_verification_expires_at = (
            verification.expires_at if verification else None
        )
        model.password_reset_token_hash = reset.token_hash if reset else None
        model.password_reset_expires_at = reset.expires_at if reset else None
        model.refresh_token = user.refresh_token
        model.login_streak = user.login_streak
        model.last_login_at = user.last_login_at
        model.updated_at = user.updated_at
        return model

    @staticmethod
    def _update_account(model: UserModel, user: User) -> None:
        model.email = user.email
        model.full_name = user.full_name
        model.role = user.role.value
