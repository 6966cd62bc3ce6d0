"""Integration tests for UserRepositorySQLAlchemy on PostgreSQL."""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from eduwise.domain.shared.time import utc_now
from eduwise_identity import DuplicateEmailError, PendingToken
from eduwise_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)
from tests.shared.fixtures import TestUserFactory

pytestmark = pytest.mark.integration

TOKEN_HASH = "c" * 64


async def test_round_trip(db_session):
    repo = UserRepositorySQLAlchemy(db_session)
    user = TestUserFactory.unverified()
    user.issue_email_verification(
        PendingToken(TOKEN_HASH, utc_now() + timedelta(hours=24)),
    )
    await repo.save(user)
    await db_session.commit()

    loaded = await repo.find_by_email("Learner@Example.com")

    assert loaded == user
    assert loaded.email_verification == user.email_verification


async def test_duplicate_email(db_session):
    repo = UserRepositorySQLAlchemy(db_session)
    await repo.save(TestUserFactory.verified(email="dup@example.com"))

    with pytest.raises(DuplicateEmailError):
        await repo.save(TestUserFactory.verified(email="dup@example.com"))


async def test_token_pair_constraint(db_session):
    user = TestUserFactory.verified()
    await UserRepositorySQLAlchemy(db_session).save(user)
    await db_session.commit()

    with pytest.raises(IntegrityError):
        await db_session.execute(
            text(
                "UPDATE users SET password_reset_token_hash = :h WHERE id = :id",
            ),
            {"h": TOKEN_HASH, "id": user.id},
        )


async def test_concurrent_consumption_succeeds_once(async_engine, db_session):
    user = TestUserFactory.unverified()
    user.issue_email_verification(
        PendingToken(TOKEN_HASH, utc_now() + timedelta(hours=1)),
    )
    await UserRepositorySQLAlchemy(db_session).save(user)
    await db_session.commit()

    session_maker = async_sessionmaker(async_engine, class_=AsyncSession)

    async def consume() -> bool:
        async with session_maker() as session:
            repo = UserRepositorySQLAlchemy(session)
            consumed = await repo.consume_email_verification(
                user.id,
                TOKEN_HASH,
                utc_now(),
            )
            await session.commit()
            return consumed

    results = await asyncio.gather(*(consume() for _ in range(5)))

    assert sorted(results) == [False, False, False, False, True]


async def test_refresh_rotation_race(async_engine, db_session):
    user = TestUserFactory.verified()
    user.issue_refresh_token("r0")
    await UserRepositorySQLAlchemy(db_session).save(user)
    await db_session.commit()

    session_maker = async_sessionmaker(async_engine, class_=AsyncSession)

    async def rotate(replacement: str) -> bool:
        async with session_maker() as session:
            rotated = await UserRepositorySQLAlchemy(session).rotate_refresh_token(
                user.id,
                expected="r0",
                replacement=replacement,
            )
            await session.commit()
            return rotated

    results = await asyncio.gather(rotate("r1"), rotate("r2"))

    assert sorted(results) == [False, True]
