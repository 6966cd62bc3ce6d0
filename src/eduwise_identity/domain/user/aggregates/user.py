"""User aggregate for the identity lifecycle."""

from datetime import datetime
from typing import Optional, Union
from uuid import UUID, uuid4

from eduwise.domain.shared.time import ensure_tz_aware, utc_now
from eduwise_identity.domain.user.services.login_streak import next_login_streak
from eduwise_identity.domain.user.value_objects import Email, PendingToken, UserRole
from eduwise_identity.exceptions import AlreadyVerifiedError, MissingFieldsError


class User:
    """
    User aggregate root.

    Holds identity, the password hash, the pending verification and reset
    tokens (hashes only), the single outstanding refresh token and the
    login streak. State changes go through the transition methods below.
    """

    def __init__(
        self,
        email: Union[str, Email],
        full_name: str,
        password_hash: str,
        role: Union[str, UserRole] = UserRole.USER,
        email_verified: bool = False,
        email_verification: Optional[PendingToken] = None,
        password_reset: Optional[PendingToken] = None,
        refresh_token: Optional[str] = None,
        login_streak: int = 0,
        last_login_at: Optional[datetime] = None,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._full_name = self._clean_full_name(full_name)
        self._password_hash = password_hash
        self._role = role if isinstance(role, UserRole) else UserRole(role)
        self._email_verified = email_verified
        # A verified user never carries a pending verification token
        self._email_verification = None if email_verified else email_verification
        self._password_reset = password_reset
        self._refresh_token = refresh_token
        self._login_streak = login_streak
        self._last_login_at = ensure_tz_aware(last_login_at) if last_login_at else None
        self._id = id or uuid4()
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()

    @staticmethod
    def _clean_full_name(full_name: str) -> str:
        cleaned = (full_name or "").strip()
        if not cleaned:
            raise MissingFieldsError(["fullName"])
        return cleaned

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def full_name(self) -> str:
        return self._full_name

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def role(self) -> UserRole:
        return self._role

    @property
    def is_admin(self) -> bool:
        return self._role == UserRole.ADMIN

    @property
    def email_verified(self) -> bool:
        return self._email_verified

    @property
    def email_verification(self) -> Optional[PendingToken]:
        return self._email_verification

    @property
    def password_reset(self) -> Optional[PendingToken]:
        return self._password_reset

    @property
    def refresh_token(self) -> Optional[str]:
        return self._refresh_token

    @property
    def login_streak(self) -> int:
        return self._login_streak

    @property
    def last_login_at(self) -> Optional[datetime]:
        return self._last_login_at

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def _touch(self) -> None:
        self._updated_at = utc_now()

    # Email verification

    def issue_email_verification(self, token: PendingToken) -> None:
        """Replace any pending verification token with ``token``."""
        if self._email_verified:
            raise AlreadyVerifiedError
        self._email_verification = token
        self._touch()

    def verify_email(self) -> None:
        self._email_verified = True
        self._email_verification = None
        self._touch()

    # Password reset

    def request_password_reset(self, token: PendingToken) -> None:
        self._password_reset = token
        self._touch()

    def clear_password_reset(self) -> None:
        self._password_reset = None
        self._touch()

    # Sessions

    def record_login(self, now: datetime | None = None) -> None:
        now = now or utc_now()
        self._login_streak = next_login_streak(
            self._login_streak,
            self._last_login_at,
            now,
        )
        self._last_login_at = ensure_tz_aware(now)
        self._touch()

    def issue_refresh_token(self, refresh_token: str) -> None:
        self._refresh_token = refresh_token
        self._touch()

    # Administration

    def change_role(self, role: UserRole) -> None:
        self._role = role
        self._touch()

    def update_profile(
        self,
        full_name: Optional[str] = None,
        email: Union[str, Email, None] = None,
    ) -> None:
        if full_name is not None:
            self._full_name = self._clean_full_name(full_name)
        if email is not None:
            self._email = email if isinstance(email, Email) else Email(email)
        self._touch()

    @classmethod
    def register(
        cls,
        full_name: str,
        email: Union[str, Email],
        password_hash: str,
        email_verification: PendingToken,
    ) -> "User":
        """Create a self-registered user: role USER, email not yet verified."""
        return cls(
            email=email,
            full_name=full_name,
            password_hash=password_hash,
            role=UserRole.USER,
            email_verified=False,
            email_verification=email_verification,
        )

    @classmethod
    def create(
        cls,
        full_name: str,
        email: Union[str, Email],
        password_hash: str,
        role: UserRole = UserRole.USER,
        email_verified: bool = False,
    ) -> "User":
        return cls(
            email=email,
            full_name=full_name,
            password_hash=password_hash,
            role=role,
            email_verified=email_verified,
        )

    @classmethod
    def reconstitute(
        cls,
        id: UUID,
        email: Union[str, Email],
        full_name: str,
        password_hash: str,
        role: Union[str, UserRole],
        email_verified: bool,
        email_verification: Optional[PendingToken],
        password_reset: Optional[PendingToken],
        refresh_token: Optional[str],
        login_streak: int,
        last_login_at: Optional[datetime],
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            email=email,
            full_name=full_name,
            password_hash=password_hash,
            role=role,
            email_verified=email_verified,
            email_verification=email_verification,
            password_reset=password_reset,
            refresh_token=refresh_token,
            login_streak=login_streak,
            last_login_at=last_login_at,
            created_at=ensure_tz_aware(created_at),
            updated_at=ensure_tz_aware(updated_at),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"User(id={self._id}, email={self._email.value}, "
            f"role={self._role.value})"
        )
