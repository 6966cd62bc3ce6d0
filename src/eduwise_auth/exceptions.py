"""Authentication exceptions.

These exceptions are raised by the eduwise_auth package and should be
caught and translated by the application layer (IdentityLifecycleService,
AccessControlService).
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class ExpiredTokenError(InvalidTokenError):
    """Raised when a JWT token's signature is valid but it has expired."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a password does not satisfy the password policy.

    ``too_short`` is set when the minimum length rule failed.
    """

    def __init__(
        self,
        message: str = "Password does not meet requirements",
        too_short: bool = False,
    ):
        super().__init__(message)
        self.too_short = too_short
