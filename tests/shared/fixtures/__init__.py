"""Shared pytest fixtures for all test domains."""

from tests.shared.fixtures.database import (
    async_engine,
    db_session,
    postgres_container,
    sqlite_engine,
    sqlite_session,
)
from tests.shared.fixtures.email import RecordingEmailDispatcher, SentEmail
from tests.shared.fixtures.factories import (
    DEFAULT_PASSWORD,
    FAST_PASSWORD_SERVICE,
    TestUserFactory,
)

__all__ = [
    "DEFAULT_PASSWORD",
    "FAST_PASSWORD_SERVICE",
    "RecordingEmailDispatcher",
    "SentEmail",
    "TestUserFactory",
    "async_engine",
    "db_session",
    "postgres_container",
    "sqlite_engine",
    "sqlite_session",
]
