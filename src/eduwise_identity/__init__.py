"""EduWise Identity - User lifecycle, authentication, and authorization.

This package handles all identity-related concerns:
- Registration and email verification
- Login, refresh token rotation and logout
- Forgot / reset password
- Role-based access control (user, instructor, admin)
- User administration (create, update, change role, delete)
- Email delivery behind the EmailDispatcher port

Course content, progress and notifications only reference user_id,
keeping identity concerns separated.
"""

from eduwise_identity.application.context import UserContext
from eduwise_identity.application.ports import EmailDispatcher
from eduwise_identity.application.services import (
    AccessControlService,
    IdentityLifecycleService,
    LoginResult,
)
from eduwise_identity.domain.user import (
    Email,
    PendingToken,
    User,
    UserRepository,
    UserRole,
)
from eduwise_identity.exceptions import (
    AlreadyVerifiedError,
    CannotDeleteSelfError,
    CannotDemoteSelfError,
    DuplicateEmailError,
    EmailDeliveryError,
    EmailNotVerifiedError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidEmailError,
    MissingFieldsError,
    PasswordMismatchError,
    PasswordTooLongError,
    PasswordTooShortError,
    RefreshTokenMismatchError,
    RoleChangeNotAllowedError,
    RoleNotAllowedError,
    TokenExpiredError,
    TokenInvalidError,
    TokenUserNotFoundError,
    UnauthenticatedError,
    UserNotFoundError,
)

__all__ = [
    # Application
    "AccessControlService",
    "EmailDispatcher",
    "IdentityLifecycleService",
    "LoginResult",
    "UserContext",
    # Domain
    "Email",
    "PendingToken",
    "User",
    "UserRepository",
    "UserRole",
    # Exceptions
    "AlreadyVerifiedError",
    "CannotDeleteSelfError",
    "CannotDemoteSelfError",
    "DuplicateEmailError",
    "EmailDeliveryError",
    "EmailNotVerifiedError",
    "ForbiddenError",
    "InvalidCredentialsError",
    "InvalidEmailError",
    "MissingFieldsError",
    "PasswordMismatchError",
    "PasswordTooLongError",
    "PasswordTooShortError",
    "RefreshTokenMismatchError",
    "RoleChangeNotAllowedError",
    "RoleNotAllowedError",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenUserNotFoundError",
    "UnauthenticatedError",
    "UserNotFoundError",
]
