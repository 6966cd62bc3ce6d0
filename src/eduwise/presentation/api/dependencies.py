"""FastAPI dependency injection for the EduWise API.

Provides dependencies for:
- Database sessions
- Authentication services and the email dispatcher
- Current user (from the bearer access token) and role checks
"""

import logging
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Annotated, AsyncGenerator, Callable, Coroutine, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from eduwise.presentation.api.config import get_api_settings
from eduwise_auth import JWTService, OpaqueTokenGenerator, PasswordHashingService
from eduwise_config.settings import Settings, get_settings
from eduwise_identity import (
    AccessControlService,
    EmailDispatcher,
    IdentityLifecycleService,
    User,
    UserContext,
    UserRole,
)
from eduwise_identity.infrastructure.email import SmtpEmailDispatcher
from eduwise_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


@lru_cache()
def get_database_url() -> str:
    """
    Get database URL from application settings.

    Returns
    -------
    Database URL string
    """
    url = get_settings().database_url

    # Ensure data directory exists for SQLite
    if url.startswith("sqlite") and ":memory:" not in url:
        db_path = url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return url


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton)
# -----------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Get the shared async database engine (singleton).

    The engine manages the connection pool and is reused across all requests.

    Returns
    -------
    AsyncEngine instance
    """
    return create_async_engine(
        get_database_url(),
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """
    Get the shared async session maker (singleton).

    Returns
    -------
    async_sessionmaker configured with the shared engine
    """
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Creates an async session for the request using the shared engine/pool.
    Routers commit or roll back explicitly.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker()() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# -----------------------------------------------------------------------------
# Authentication Services
# -----------------------------------------------------------------------------


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        access_secret=settings.jwt_access_secret.get_secret_value(),
        refresh_secret=settings.jwt_refresh_secret.get_secret_value(),
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
    )


def get_password_service() -> PasswordHashingService:
    """Get password hashing service."""
    return PasswordHashingService()


def get_token_generator() -> OpaqueTokenGenerator:
    return OpaqueTokenGenerator()


def get_email_dispatcher(settings: SettingsDep) -> EmailDispatcher:
    """Get the email dispatcher. Tests override this with a recorder."""
    return SmtpEmailDispatcher(settings)


async def get_identity_service(
    session: DBSession,
    settings: SettingsDep,
    jwt_service: JWTService = Depends(get_jwt_service),
    password_service: PasswordHashingService = Depends(get_password_service),
    token_generator: OpaqueTokenGenerator = Depends(get_token_generator),
    email_dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
) -> IdentityLifecycleService:
    """
    Get identity lifecycle service with all dependencies.

    This service orchestrates registration, verification, login, refresh,
    password reset and logout.
    """
    return IdentityLifecycleService(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
        jwt_service=jwt_service,
        token_generator=token_generator,
        email_dispatcher=email_dispatcher,
        verification_url_base=settings.verification_url_base,
        reset_url_base=settings.reset_url_base,
        verification_ttl=timedelta(hours=settings.email_verification_expire_hours),
        reset_ttl=timedelta(hours=settings.password_reset_expire_hours),
    )


# Type alias for injected identity service
IdentityService = Annotated[IdentityLifecycleService, Depends(get_identity_service)]


async def get_access_control_service(
    session: DBSession,
    jwt_service: JWTService = Depends(get_jwt_service),
) -> AccessControlService:
    return AccessControlService(
        user_repository=UserRepositorySQLAlchemy(session),
        jwt_service=jwt_service,
    )


AccessControl = Annotated[AccessControlService, Depends(get_access_control_service)]


# -----------------------------------------------------------------------------
# Current User (JWT Authentication)
# -----------------------------------------------------------------------------


async def get_current_user(
    access_control: AccessControl,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    """
    FastAPI dependency to get the current authenticated user from JWT.

    Extracts the bearer token from the Authorization header and resolves
    it to a stored user. Failures propagate as domain exceptions and are
    rendered by the exception handlers (401 with a distinct code for an
    expired token).
    """
    token = credentials.credentials if credentials else None
    return await access_control.authenticate(token)


# Type alias for injected current user
CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_current_user_optional(
    access_control: AccessControl,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User | None:
    """
    Optional authentication dependency.

    Returns the current user if a valid token is provided, None otherwise.
    """
    token = credentials.credentials if credentials else None
    return await access_control.optional_authenticate(token)


# Type alias for optional current user
OptionalCurrentUser = Annotated[Optional[User], Depends(get_current_user_optional)]


def require_roles(*roles: UserRole) -> Callable[..., Coroutine[None, None, User]]:
    """Build a dependency that admits only users holding one of ``roles``."""

    async def _require_roles(user: CurrentUser) -> User:
        return AccessControlService.authorize_roles(user, roles)

    return _require_roles


# Type aliases for role-restricted users
AdminUser = Annotated[User, Depends(require_roles(UserRole.ADMIN))]
StaffUser = Annotated[User, Depends(require_roles(UserRole.ADMIN, UserRole.INSTRUCTOR))]


async def get_user_context(user: CurrentUser) -> UserContext:
    """Get UserContext for the authenticated caller."""
    return UserContext.create(user)


# Type alias for injected user context
CurrentUserContext = Annotated[UserContext, Depends(get_user_context)]
