"""
Pytest configuration for eduwise_identity domain tests.

Provides users, the fast password service and the recording email
dispatcher; database fixtures come from tests.shared.fixtures.
"""

import pytest

from eduwise_auth import PasswordHashingService
from eduwise_identity import User, UserRole
from tests.shared.fixtures import (
    FAST_PASSWORD_SERVICE,
    RecordingEmailDispatcher,
    TestUserFactory,
    sqlite_engine,
    sqlite_session,
)

__all__ = [
    "sqlite_engine",
    "sqlite_session",
]


@pytest.fixture
def password_service() -> PasswordHashingService:
    return FAST_PASSWORD_SERVICE


@pytest.fixture
def email_dispatcher() -> RecordingEmailDispatcher:
    return RecordingEmailDispatcher()


@pytest.fixture
def test_user() -> User:
    """A verified learner."""
    return TestUserFactory.verified()


@pytest.fixture
def admin_user() -> User:
    return TestUserFactory.verified(
        email="admin@example.com",
        full_name="Ada Admin",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def instructor_user() -> User:
    return TestUserFactory.verified(
        email="instructor@example.com",
        full_name="Ivan Instructor",
        role=UserRole.INSTRUCTOR,
    )
