"""Identity exceptions.

Every failure of the identity lifecycle is a DomainException with a stable
ErrorCode, so the presentation layer can map it to a status and envelope
without knowing about individual classes.
"""

from typing import Any

from eduwise.domain.shared import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleViolation,
    ConflictError,
    DependencyFailureError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from eduwise_auth import WeakPasswordError


class InvalidEmailError(ValidationError):
    """Raised when email format is invalid."""

    def __init__(self, message: str = "Please provide a valid email") -> None:
        super().__init__(message, ErrorCode.INVALID_EMAIL)


class MissingFieldsError(ValidationError):
    """Raised when required input fields are absent or blank."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(
            f"Please provide all required fields: {', '.join(fields)}",
            details={"fields": fields},
        )


class PasswordMismatchError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Passwords do not match", ErrorCode.PASSWORD_MISMATCH)


class PasswordTooShortError(ValidationError):
    def __init__(self, message: str = "Password must be at least 8 characters") -> None:
        super().__init__(message, ErrorCode.PASSWORD_TOO_SHORT)


class PasswordTooLongError(ValidationError):
    def __init__(self, message: str = "Password is too long") -> None:
        super().__init__(message, ErrorCode.PASSWORD_TOO_LONG)


def password_policy_error(error: WeakPasswordError) -> ValidationError:
    """Translate a password policy failure into the matching domain error."""
    if error.too_short:
        return PasswordTooShortError(error.message)
    return PasswordTooLongError(error.message)


class RoleNotAllowedError(ValidationError):
    """Raised when self-service input asks for a non-default role."""

    def __init__(self, role: str) -> None:
        super().__init__(
            "Role cannot be chosen during registration",
            ErrorCode.ROLE_NOT_ALLOWED,
            details={"requested_role": role},
        )


class TokenInvalidError(ValidationError):
    """Raised when a presented token matches nothing the server holds."""

    def __init__(self, message: str = "Invalid or already used token") -> None:
        super().__init__(message, ErrorCode.TOKEN_INVALID)


class AlreadyVerifiedError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Email is already verified", ErrorCode.ALREADY_VERIFIED)


class DuplicateEmailError(ConflictError):
    """Email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "User with this email already exists",
            ErrorCode.DUPLICATE_EMAIL,
            details={"email": email},
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised when email or password is incorrect during login.

    The message is identical for an unknown email and a wrong password.
    """

    def __init__(self) -> None:
        super().__init__("Invalid email or password", ErrorCode.INVALID_CREDENTIALS)


class UnauthenticatedError(AuthenticationError):
    def __init__(self, message: str = "Not authorized to access this route") -> None:
        super().__init__(message, ErrorCode.UNAUTHENTICATED)


class TokenExpiredError(AuthenticationError):
    """Raised for expired signed tokens and expired one-time tokens alike."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message, ErrorCode.TOKEN_EXPIRED, details={"expired": True})


class RefreshTokenMismatchError(AuthenticationError):
    """Raised when a valid refresh token is not the one currently on record."""

    def __init__(self) -> None:
        super().__init__(
            "Refresh token is no longer valid",
            ErrorCode.REFRESH_TOKEN_MISMATCH,
        )


class TokenUserNotFoundError(AuthenticationError):
    """Raised when a signed token names a user that no longer exists."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            "User belonging to this token no longer exists",
            ErrorCode.TOKEN_USER_NOT_FOUND,
            details={"user_id": user_id},
        )


class EmailNotVerifiedError(AuthorizationError):
    def __init__(self) -> None:
        super().__init__(
            "Please verify your email before logging in",
            ErrorCode.EMAIL_NOT_VERIFIED,
        )


class ForbiddenError(AuthorizationError):
    """Raised when the caller's role is not in the allowed set."""

    def __init__(self, role: str, allowed: list[str] | None = None) -> None:
        details: dict[str, Any] = {"role": role}
        if allowed is not None:
            details["allowed"] = allowed
        super().__init__(
            f"User role '{role}' is not authorized to access this route",
            ErrorCode.FORBIDDEN,
            details=details,
        )


class RoleChangeNotAllowedError(AuthorizationError):
    def __init__(self) -> None:
        super().__init__(
            "Role can only be changed by an administrator",
            ErrorCode.ROLE_CHANGE_NOT_ALLOWED,
        )


class UserNotFoundError(EntityNotFoundError):
    """User not found."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(
            "User not found",
            ErrorCode.USER_NOT_FOUND,
            details={"user_id": user_id},
        )


class CannotDeleteSelfError(BusinessRuleViolation):
    """Cannot delete your own account."""

    def __init__(self) -> None:
        super().__init__("Cannot delete your own account", ErrorCode.CANNOT_DELETE_SELF)


class CannotDemoteSelfError(BusinessRuleViolation):
    """Cannot demote yourself from admin."""

    def __init__(self) -> None:
        super().__init__(
            "Cannot demote yourself from admin",
            ErrorCode.CANNOT_DEMOTE_SELF,
        )


class EmailDeliveryError(DependencyFailureError):
    """Raised by an EmailDispatcher when a message could not be delivered.

    ``reason`` is kept for logs; the public message stays generic.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(details={"reason": reason})
