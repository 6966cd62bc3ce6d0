"""
Fixtures for API tests.

The app runs against a file-backed SQLite database (NullPool, so the
TestClient's event loop and ``asyncio.run`` helpers never share a
connection). Emails go to a RecordingEmailDispatcher. The lifespan is not
entered, so no production engine is ever created.
"""

import asyncio
from typing import AsyncGenerator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from eduwise.presentation.api.app import create_app
from eduwise.presentation.api.dependencies import (
    get_db_session,
    get_email_dispatcher,
    get_password_service,
)
from eduwise_identity import User, UserRole
from eduwise_identity.application.commands import CreateUserCommand
from eduwise_identity.infrastructure.persistence.sqlalchemy import (
    UserModel,
    UserRepositorySQLAlchemy,
    create_tables,
)
from tests.shared.fixtures import (
    DEFAULT_PASSWORD,
    FAST_PASSWORD_SERVICE,
    RecordingEmailDispatcher,
)


class Database:
    """Synchronous helpers for seeding and inspecting the test database."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def create_user(
        self,
        email: str,
        role: UserRole = UserRole.USER,
        full_name: str = "Seeded User",
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        async def _create() -> User:
            async with self.session_maker() as session:
                command = CreateUserCommand(
                    UserRepositorySQLAlchemy(session),
                    FAST_PASSWORD_SERVICE,
                )
                user = await command.execute(full_name, email, password, role)
                await session.commit()
                return user

        return asyncio.run(_create())

    def get_user(self, email: str) -> Optional[User]:
        async def _get() -> Optional[User]:
            async with self.session_maker() as session:
                return await UserRepositorySQLAlchemy(session).find_by_email(email)

        return asyncio.run(_get())

    def update_user(self, email: str, **values) -> None:
        async def _update() -> None:
            async with self.session_maker() as session:
                await session.execute(
                    update(UserModel).where(UserModel.email == email).values(**values),
                )
                await session.commit()

        asyncio.run(_update())


@pytest.fixture
def database(tmp_path) -> Database:
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        poolclass=NullPool,
    )
    asyncio.run(create_tables(engine))
    return Database(engine)


@pytest.fixture
def emails() -> RecordingEmailDispatcher:
    return RecordingEmailDispatcher()


@pytest.fixture
def client(database, emails) -> TestClient:
    app = create_app()

    async def _session() -> AsyncGenerator[AsyncSession, None]:
        async with database.session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_email_dispatcher] = lambda: emails
    app.dependency_overrides[get_password_service] = lambda: FAST_PASSWORD_SERVICE

    return TestClient(app)
