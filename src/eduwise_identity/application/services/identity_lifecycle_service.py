"""Identity lifecycle: registration, verification, sessions, password reset."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable, Optional, Union
from uuid import UUID

from eduwise.domain.shared import DependencyFailureError
from eduwise.domain.shared.time import utc_now
from eduwise_auth import (
    ExpiredTokenError,
    InvalidTokenError,
    JWTService,
    OpaqueTokenGenerator,
    PasswordHashingService,
    TokenPair,
    WeakPasswordError,
)
from eduwise_identity.domain.user import Email, PendingToken, User, UserRole
from eduwise_identity.exceptions import (
    AlreadyVerifiedError,
    DuplicateEmailError,
    EmailDeliveryError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    InvalidEmailError,
    MissingFieldsError,
    PasswordMismatchError,
    RefreshTokenMismatchError,
    RoleNotAllowedError,
    TokenExpiredError,
    TokenInvalidError,
    TokenUserNotFoundError,
    password_policy_error,
)
from eduwise_identity.infrastructure.email.templates import (
    PASSWORD_RESET_SUBJECT,
    VERIFICATION_SUBJECT,
    password_reset_email,
    verification_email,
)

if TYPE_CHECKING:
    from eduwise_identity.application.ports import EmailDispatcher
    from eduwise_identity.domain.user import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_VERIFICATION_TTL = timedelta(hours=24)
DEFAULT_RESET_TTL = timedelta(hours=1)


@dataclass(frozen=True)
class LoginResult:
    user: User
    tokens: TokenPair


class IdentityLifecycleService:
    """
    Application service for the identity lifecycle.

    Orchestrates eduwise_auth infrastructure (password hashing, signed and
    opaque tokens) with the User aggregate and the email dispatcher:
    - Registration and email verification
    - Login with password, refresh token rotation, logout
    - Forgot / reset password

    One-time tokens are consumed with a conditional update on the
    repository, so a token can only ever be spent once. Expiry is checked
    when a token is presented; nothing sweeps expired tokens in the
    background.
    """

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        token_generator: OpaqueTokenGenerator,
        email_dispatcher: EmailDispatcher,
        verification_url_base: str,
        reset_url_base: str,
        verification_ttl: timedelta = DEFAULT_VERIFICATION_TTL,
        reset_ttl: timedelta = DEFAULT_RESET_TTL,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._token_generator = token_generator
        self._email_dispatcher = email_dispatcher
        self._verification_url_base = verification_url_base.rstrip("/")
        self._reset_url_base = reset_url_base.rstrip("/")
        self._verification_ttl = verification_ttl
        self._reset_ttl = reset_ttl
        self._clock = clock

    # ------------------------------------------------------------------
    # Registration and verification
    # ------------------------------------------------------------------

    async def register(  # noqa: PLR0913
        self,
        full_name: str,
        email: str,
        password: str,
        password_confirm: str,
        role: Union[str, UserRole, None] = None,
    ) -> User:
        """Create an unverified USER account and send the verification link.

        A failed verification email does not undo the registration; the user
        can ask for a new link through ``resend_verification``.

        Raises
        ------
        MissingFieldsError
            If any field is blank
        RoleNotAllowedError
            If a role other than "user" is requested
        PasswordMismatchError, PasswordTooShortError, PasswordTooLongError
            If the password fails confirmation or policy
        DuplicateEmailError
            If the address is already registered
        """
        self._require_fields(
            full_name=full_name,
            email=email,
            password=password,
            password_confirm=password_confirm,
        )
        if role is not None and role != UserRole.USER:
            raise RoleNotAllowedError(str(getattr(role, "value", role)))
        self._check_new_password(password, password_confirm)

        email_obj = Email(email)
        if await self._user_repo.exists_by_email(email_obj):
            raise DuplicateEmailError(email_obj.value)

        password_hash = self._password_service.hash(password)
        token = self._token_generator.new_token()
        user = User.register(
            full_name=full_name,
            email=email_obj,
            password_hash=password_hash,
            email_verification=self._pending(token.token_hash, self._verification_ttl),
        )
        await self._user_repo.save(user)
        logger.info("User registered: %s", user.email)

        await self._send_verification(user, token.plaintext)
        return user

    async def verify_email(self, token: str) -> User:
        """Consume a verification token and mark the owner's email verified.

        Raises
        ------
        TokenInvalidError
            If the token matches no pending verification (including reuse)
        TokenExpiredError
            If it matches one whose expiry has passed; that token is cleared
        """
        if not token:
            raise TokenInvalidError

        token_hash = self._token_generator.hash_token(token)
        user = await self._user_repo.find_by_email_verification_hash(token_hash)
        if user is None or user.email_verification is None:
            raise TokenInvalidError

        now = self._clock()
        if user.email_verification.is_expired(now):
            await self._user_repo.clear_email_verification(user.id, token_hash)
            msg = "Verification token has expired"
            raise TokenExpiredError(msg)

        consumed = await self._user_repo.consume_email_verification(
            user.id,
            token_hash,
            now,
        )
        if not consumed:
            # Another request spent the same token first
            raise TokenInvalidError

        user.verify_email()
        logger.info("Email verified for user: %s", user.email)
        return user

    async def resend_verification(self, email: str) -> None:
        """Issue a fresh verification link.

        Unknown addresses are a silent no-op so that the caller cannot tell
        whether an account exists.

        Raises
        ------
        AlreadyVerifiedError
            If the account is already verified
        """
        self._require_fields(email=email)
        email_obj = Email(email)

        user = await self._user_repo.find_by_email(email_obj)
        if user is None:
            logger.debug("Verification resend requested for unknown email")
            return

        token = self._token_generator.new_token()
        user.issue_email_verification(
            self._pending(token.token_hash, self._verification_ttl),
        )
        if not await self._user_repo.reissue_email_verification(user):
            # Verified by another request since it was loaded
            raise AlreadyVerifiedError
        logger.info("Verification token reissued for user: %s", user.email)

        await self._send_verification(user, token.plaintext)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> LoginResult:
        """Check credentials, update the login streak and issue a token pair.

        Raises
        ------
        InvalidCredentialsError
            If the email is unknown or the password is wrong
        EmailNotVerifiedError
            If the password is right but the email is not verified yet
        """
        self._require_fields(email=email, password=password)
        try:
            email_obj = Email(email)
        except InvalidEmailError as e:
            raise InvalidCredentialsError from e

        user = await self._user_repo.find_by_email(email_obj)
        if user is None:
            raise InvalidCredentialsError
        if not self._password_service.verify(password, user.password_hash):
            raise InvalidCredentialsError
        if not user.email_verified:
            raise EmailNotVerifiedError

        user.record_login(self._clock())
        tokens = self._jwt_service.create_token_pair(user.id)
        user.issue_refresh_token(tokens.refresh_token)
        await self._user_repo.record_login(user)

        logger.info("User logged in: %s (streak: %d)", user.email, user.login_streak)
        return LoginResult(user=user, tokens=tokens)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange the current refresh token for a new pair.

        The stored refresh token is swapped only if it still equals the
        presented one, so an older or already-rotated token always fails.

        Raises
        ------
        TokenInvalidError
            If the token is malformed, badly signed or not a refresh token
        TokenExpiredError
            If the token has expired
        TokenUserNotFoundError
            If the user it names no longer exists
        RefreshTokenMismatchError
            If it is not the refresh token currently on record
        """
        self._require_fields(refresh_token=refresh_token)
        try:
            payload = self._jwt_service.verify_refresh_token(refresh_token)
        except ExpiredTokenError as e:
            msg = "Refresh token has expired"
            raise TokenExpiredError(msg) from e
        except InvalidTokenError as e:
            msg = "Invalid refresh token"
            raise TokenInvalidError(msg) from e

        user = await self._user_repo.find_by_id(payload.user_id)
        if user is None:
            raise TokenUserNotFoundError(str(payload.user_id))

        tokens = self._jwt_service.create_token_pair(user.id)
        rotated = await self._user_repo.rotate_refresh_token(
            user.id,
            expected=refresh_token,
            replacement=tokens.refresh_token,
        )
        if not rotated:
            logger.warning("Stale refresh token presented for user: %s", user.id)
            raise RefreshTokenMismatchError

        logger.debug("Tokens refreshed for user: %s", user.id)
        return tokens

    async def logout(self, user_id: UUID) -> None:
        await self._user_repo.clear_refresh_token(user_id)
        logger.info("User logged out: %s", user_id)

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    async def forgot_password(self, email: str) -> None:
        """Send a password reset link if the address belongs to an account.

        Returns the same way for known and unknown addresses. If the email
        cannot be delivered the reset token just written is cleared again
        before the failure is reported.

        Raises
        ------
        DependencyFailureError
            If the reset email could not be delivered
        """
        self._require_fields(email=email)
        email_obj = Email(email)

        user = await self._user_repo.find_by_email(email_obj)
        if user is None:
            # Silent fail to prevent email enumeration
            logger.debug("Password reset requested for unknown email")
            return

        token = self._token_generator.new_token()
        user.request_password_reset(self._pending(token.token_hash, self._reset_ttl))
        await self._user_repo.set_password_reset(user)

        link = f"{self._reset_url_base}/{token.plaintext}"
        body = password_reset_email(user.full_name, link, self._hours(self._reset_ttl))
        try:
            await self._email_dispatcher.send(user.email, PASSWORD_RESET_SUBJECT, body)
        except EmailDeliveryError as e:
            logger.error("Failed to send password reset email: %s", e.reason)
            user.clear_password_reset()
            await self._user_repo.clear_password_reset(user.id, token.token_hash)
            raise DependencyFailureError(details={"reason": e.reason}) from e

        logger.info("Password reset email sent to %s", user.email)

    async def reset_password(
        self,
        token: str,
        password: str,
        password_confirm: str,
    ) -> None:
        """Set a new password using a reset token.

        The password is checked before the token is looked up. The new hash
        and the cleared token are written in one conditional update.

        Raises
        ------
        MissingFieldsError, PasswordMismatchError
            If the new password is missing or unconfirmed
        PasswordTooShortError, PasswordTooLongError
            If the new password breaks the password policy
        TokenInvalidError
            If the token matches no pending reset (including reuse)
        TokenExpiredError
            If it matches one whose expiry has passed; that token is cleared
        """
        self._require_fields(password=password, password_confirm=password_confirm)
        self._check_new_password(password, password_confirm)
        if not token:
            raise TokenInvalidError

        token_hash = self._token_generator.hash_token(token)
        user = await self._user_repo.find_by_password_reset_hash(token_hash)
        if user is None or user.password_reset is None:
            raise TokenInvalidError

        now = self._clock()
        if user.password_reset.is_expired(now):
            await self._user_repo.clear_password_reset(user.id, token_hash)
            msg = "Password reset token has expired"
            raise TokenExpiredError(msg)

        new_hash = self._password_service.hash(password)
        consumed = await self._user_repo.consume_password_reset(
            user.id,
            token_hash,
            new_hash,
            now,
        )
        if not consumed:
            raise TokenInvalidError

        logger.info("Password reset completed for user: %s", user.id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _pending(self, token_hash: str, ttl: timedelta) -> PendingToken:
        return PendingToken(token_hash=token_hash, expires_at=self._clock() + ttl)

    @staticmethod
    def _hours(ttl: timedelta) -> int:
        return max(int(ttl.total_seconds() // 3600), 1)

    @staticmethod
    def _require_fields(**fields: Optional[str]) -> None:
        missing = [
            name for name, value in fields.items() if not value or not value.strip()
        ]
        if missing:
            raise MissingFieldsError(missing)

    def _check_new_password(self, password: str, password_confirm: str) -> None:
        if password != password_confirm:
            raise PasswordMismatchError
        try:
            self._password_service.check_policy(password)
        except WeakPasswordError as e:
            raise password_policy_error(e) from e

    async def _send_verification(self, user: User, plaintext: str) -> None:
        link = f"{self._verification_url_base}/{plaintext}"
        body = verification_email(
            user.full_name,
            link,
            self._hours(self._verification_ttl),
        )
        try:
            await self._email_dispatcher.send(user.email, VERIFICATION_SUBJECT, body)
        except EmailDeliveryError as e:
            logger.warning(
                "Verification email to %s could not be sent: %s",
                user.email,
                e.reason,
            )
