"""UserRepositorySQLAlchemy against an in-memory SQLite database."""

from datetime import timedelta

import pytest

from eduwise.domain.shared.time import utc_now
from eduwise_identity import DuplicateEmailError, PendingToken, UserRole
from eduwise_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)
from tests.shared.fixtures import TestUserFactory

HASH_A = "a" * 64
HASH_B = "b" * 64


@pytest.fixture
def repo(sqlite_session) -> UserRepositorySQLAlchemy:
    return UserRepositorySQLAlchemy(sqlite_session)


def _pending(token_hash: str, minutes: int) -> PendingToken:
    return PendingToken(token_hash, utc_now() + timedelta(minutes=minutes))


class TestCrud:
    async def test_round_trip_keeps_all_fields(self, repo):
        user = TestUserFactory.unverified()
        user.issue_email_verification(_pending(HASH_A, 60))
        user.request_password_reset(_pending(HASH_B, 30))
        user.record_login(utc_now())
        user.issue_refresh_token("refresh-token")
        await repo.save(user)

        loaded = await repo.find_by_id(user.id)

        assert loaded == user
        assert loaded.email == user.email
        assert loaded.full_name == user.full_name
        assert loaded.password_hash == user.password_hash
        assert loaded.email_verification == user.email_verification
        assert loaded.password_reset == user.password_reset
        assert loaded.refresh_token == "refresh-token"
        assert loaded.login_streak == 1
        assert loaded.last_login_at.tzinfo is not None

    async def test_find_by_email_is_case_insensitive(self, repo, test_user):
        await repo.save(test_user)

        assert await repo.find_by_email("LEARNER@Example.com") == test_user
        assert await repo.exists_by_email("learner@example.com")
        assert not await repo.exists_by_email("other@example.com")

    async def test_duplicate_email_rejected(self, repo):
        await repo.save(TestUserFactory.verified(email="dup@example.com"))

        with pytest.raises(DuplicateEmailError):
            await repo.save(TestUserFactory.verified(email="DUP@example.com"))

    async def test_update_existing(self, repo, test_user):
        await repo.save(test_user)
        test_user.change_role(UserRole.INSTRUCTOR)
        await repo.save(test_user)

        assert (await repo.find_by_id(test_user.id)).role == UserRole.INSTRUCTOR
        assert len(await repo.list_all()) == 1

    async def test_list_filters_by_role(self, repo, test_user, admin_user):
        await repo.save(test_user)
        await repo.save(admin_user)

        assert {u.id for u in await repo.list_all()} == {test_user.id, admin_user.id}
        assert await repo.list_all(role=UserRole.ADMIN) == [admin_user]

    async def test_delete(self, repo, test_user):
        await repo.save(test_user)
        await repo.delete(test_user.id)

        assert await repo.find_by_id(test_user.id) is None


class TestOneTimeTokens:
    async def test_lookup_by_hash(self, repo):
        user = TestUserFactory.unverified()
        user.issue_email_verification(_pending(HASH_A, 60))
        user.request_password_reset(_pending(HASH_B, 60))
        await repo.save(user)

        assert await repo.find_by_email_verification_hash(HASH_A) == user
        assert await repo.find_by_password_reset_hash(HASH_B) == user
        assert await repo.find_by_email_verification_hash(HASH_B) is None

    async def test_verification_consumed_once(self, repo):
        user = TestUserFactory.unverified()
        user.issue_email_verification(_pending(HASH_A, 60))
        await repo.save(user)

        assert await repo.consume_email_verification(user.id, HASH_A, utc_now())
        assert not await repo.consume_email_verification(user.id, HASH_A, utc_now())

        loaded = await repo.find_by_id(user.id)
        assert loaded.email_verified
        assert loaded.email_verification is None

    async def test_expired_verification_not_consumed(self, repo):
        user = TestUserFactory.unverified()
        user.issue_email_verification(_pending(HASH_A, 60))
        await repo.save(user)

        later = utc_now() + timedelta(hours=2)
        assert not await repo.consume_email_verification(user.id, HASH_A, later)

        await repo.clear_email_verification(user.id, HASH_A)
        loaded = await repo.find_by_id(user.id)
        assert loaded.email_verification is None
        assert not loaded.email_verified

    async def test_password_reset_consumed_once(self, repo, test_user):
        test_user.request_password_reset(_pending(HASH_B, 60))
        await repo.save(test_user)

        now = utc_now()
        assert await repo.consume_password_reset(test_user.id, HASH_B, "new-hash", now)
        assert not await repo.consume_password_reset(
            test_user.id,
            HASH_B,
            "other-hash",
            now,
        )

        loaded = await repo.find_by_id(test_user.id)
        assert loaded.password_hash == "new-hash"
        assert loaded.password_reset is None

    async def test_clear_reset_by_current_hash(self, repo, test_user):
        test_user.request_password_reset(_pending(HASH_B, -5))
        await repo.save(test_user)

        await repo.clear_password_reset(test_user.id, "c" * 64)
        assert (await repo.find_by_id(test_user.id)).password_reset is not None

        await repo.clear_password_reset(test_user.id, HASH_B)
        assert (await repo.find_by_id(test_user.id)).password_reset is None


class TestLifecycleUpdates:
    async def test_reissue_verification_for_unverified_user(self, repo):
        user = TestUserFactory.unverified()
        user.issue_email_verification(_pending(HASH_A, 60))
        await repo.save(user)

        user.issue_email_verification(_pending(HASH_B, 60))
        assert await repo.reissue_email_verification(user)

        assert await repo.find_by_email_verification_hash(HASH_B) == user
        assert await repo.find_by_email_verification_hash(HASH_A) is None

    async def test_reissue_refused_once_verified(self, repo):
        user = TestUserFactory.unverified()
        user.issue_email_verification(_pending(HASH_A, 60))
        await repo.save(user)
        snapshot = await repo.find_by_id(user.id)
        assert await repo.consume_email_verification(user.id, HASH_A, utc_now())

        snapshot.issue_email_verification(_pending(HASH_B, 60))
        assert not await repo.reissue_email_verification(snapshot)

        loaded = await repo.find_by_id(user.id)
        assert loaded.email_verified
        assert loaded.email_verification is None

    async def test_record_login_keeps_password(self, repo, test_user):
        test_user.request_password_reset(_pending(HASH_B, 60))
        await repo.save(test_user)
        snapshot = await repo.find_by_id(test_user.id)
        assert await repo.consume_password_reset(
            test_user.id, HASH_B, "new-hash", utc_now()
        )

        snapshot.record_login(utc_now())
        snapshot.issue_refresh_token("refresh-token")
        await repo.record_login(snapshot)

        loaded = await repo.find_by_id(test_user.id)
        assert loaded.password_hash == "new-hash"
        assert loaded.password_reset is None
        assert loaded.refresh_token == "refresh-token"
        assert loaded.login_streak == 1

    async def test_set_password_reset(self, repo, test_user):
        await repo.save(test_user)

        test_user.request_password_reset(_pending(HASH_B, 30))
        await repo.set_password_reset(test_user)

        assert await repo.find_by_password_reset_hash(HASH_B) == test_user

    async def test_save_of_stale_snapshot_keeps_lifecycle_state(self, repo):
        user = TestUserFactory.unverified()
        user.issue_email_verification(_pending(HASH_A, 60))
        await repo.save(user)
        snapshot = await repo.find_by_id(user.id)
        assert await repo.consume_email_verification(user.id, HASH_A, utc_now())

        snapshot.update_profile(full_name="Grace B. Hopper")
        await repo.save(snapshot)

        loaded = await repo.find_by_id(user.id)
        assert loaded.full_name == "Grace B. Hopper"
        assert loaded.email_verified
        assert loaded.email_verification is None


class TestRefreshTokens:
    async def test_rotation_requires_current_token(self, repo, test_user):
        test_user.issue_refresh_token("r1")
        await repo.save(test_user)

        assert await repo.rotate_refresh_token(test_user.id, "r1", "r2")
        assert not await repo.rotate_refresh_token(test_user.id, "r1", "r3")
        assert (await repo.find_by_id(test_user.id)).refresh_token == "r2"

    async def test_clear_refresh_token(self, repo, test_user):
        test_user.issue_refresh_token("r1")
        await repo.save(test_user)

        await repo.clear_refresh_token(test_user.id)
        await repo.clear_refresh_token(test_user.id)

        assert (await repo.find_by_id(test_user.id)).refresh_token is None
