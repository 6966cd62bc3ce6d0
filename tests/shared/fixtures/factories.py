"""Factories for building User aggregates in tests."""

from datetime import timedelta
from typing import Optional

from eduwise.domain.shared.time import utc_now
from eduwise_auth import OpaqueTokenGenerator, PasswordHashingService
from eduwise_identity import PendingToken, User, UserRole

DEFAULT_PASSWORD = "correct-horse-battery"

# Low work factor keeps bcrypt fast in tests
FAST_PASSWORD_SERVICE = PasswordHashingService(rounds=4)


class TestUserFactory:
    """Build users with sensible defaults.

    Hashing is done once per password and cached.
    """

    __test__ = False  # not a test class

    _hash_cache: dict[str, str] = {}

    @classmethod
    def password_hash(cls, password: str = DEFAULT_PASSWORD) -> str:
        if password not in cls._hash_cache:
            cls._hash_cache[password] = FAST_PASSWORD_SERVICE.hash(password)
        return cls._hash_cache[password]

    @classmethod
    def verified(
        cls,
        email: str = "learner@example.com",
        full_name: str = "Grace Hopper",
        role: UserRole = UserRole.USER,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        return User.create(
            full_name=full_name,
            email=email,
            password_hash=cls.password_hash(password),
            role=role,
            email_verified=True,
        )

    @classmethod
    def unverified(
        cls,
        email: str = "learner@example.com",
        full_name: str = "Grace Hopper",
        token: Optional[str] = None,
        lifetime: timedelta = timedelta(hours=24),
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        pending = None
        if token is not None:
            pending = PendingToken(
                token_hash=OpaqueTokenGenerator.hash_token(token),
                expires_at=utc_now() + lifetime,
            )
        return User.register(
            full_name=full_name,
            email=email,
            password_hash=cls.password_hash(password),
            email_verification=pending,
        )
