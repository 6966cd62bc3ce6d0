"""User repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from eduwise_identity.domain.user.aggregates.user import User
from eduwise_identity.domain.user.value_objects import Email, UserRole


class UserRepository(ABC):
    """Repository interface for User aggregates.

    Besides plain CRUD this exposes conditional single-row updates. Each one
    checks and changes a token field in one statement and reports whether a
    row matched, so two concurrent requests can never both consume the same
    one-time token or rotate from the same refresh token.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their email address (case-insensitive)."""

    @abstractmethod
    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        """Check if a user exists with the given email."""

    @abstractmethod
    async def find_by_email_verification_hash(self, token_hash: str) -> Optional[User]:
        """Find the user holding this verification token hash, expired or not."""

    @abstractmethod
    async def find_by_password_reset_hash(self, token_hash: str) -> Optional[User]:
        """Find the user holding this reset token hash, expired or not."""

    @abstractmethod
    async def save(self, user: User) -> None:
        """Insert a new user, or update an existing user's account fields.

        An update writes only email, full name and role. Verification,
        reset, session and streak state of an existing user changes solely
        through the targeted updates below, so a snapshot loaded earlier in
        a request can never overwrite a lifecycle change committed since.

        Raises
        ------
        DuplicateEmailError
            If another user already holds the email address
        """

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """Delete a user by ID."""

    @abstractmethod
    async def list_all(self, role: Optional[UserRole] = None) -> list[User]:
        """List users, optionally filtered by role, newest first."""

    # Targeted lifecycle updates

    @abstractmethod
    async def reissue_email_verification(self, user: User) -> bool:
        """Store ``user.email_verification`` if the email is still unverified.

        Returns False if the stored user is verified (or gone).
        """

    @abstractmethod
    async def record_login(self, user: User) -> None:
        """Store the login streak, last login time and refresh token."""

    @abstractmethod
    async def set_password_reset(self, user: User) -> None:
        """Store ``user.password_reset``, replacing any pending reset."""

    # Conditional updates

    @abstractmethod
    async def consume_email_verification(
        self,
        user_id: UUID,
        token_hash: str,
        now: datetime,
    ) -> bool:
        """Mark the email verified and clear the token if it still matches.

        Returns True only if the hash was present and unexpired at ``now``.
        """

    @abstractmethod
    async def consume_password_reset(
        self,
        user_id: UUID,
        token_hash: str,
        new_password_hash: str,
        now: datetime,
    ) -> bool:
        """Set the new password and clear the token if it still matches.

        Returns True only if the hash was present and unexpired at ``now``.
        """

    @abstractmethod
    async def clear_email_verification(
        self,
        user_id: UUID,
        token_hash: str,
    ) -> None:
        """Clear the verification token if it is still ``token_hash``."""

    @abstractmethod
    async def clear_password_reset(
        self,
        user_id: UUID,
        token_hash: str,
    ) -> None:
        """Clear the reset token if it is still ``token_hash``."""

    @abstractmethod
    async def rotate_refresh_token(
        self,
        user_id: UUID,
        expected: str,
        replacement: str,
    ) -> bool:
        """Swap the stored refresh token if it still equals ``expected``."""

    @abstractmethod
    async def clear_refresh_token(self, user_id: UUID) -> None:
        """Forget the stored refresh token (idempotent)."""
