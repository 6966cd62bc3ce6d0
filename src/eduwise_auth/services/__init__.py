"""Authentication services.

Provides password hashing, JWT token management and opaque token generation.
"""

from eduwise_auth.services.jwt_service import JWTService
from eduwise_auth.services.opaque_token_service import OpaqueTokenGenerator
from eduwise_auth.services.password_service import PasswordHashingService

__all__ = [
    "JWTService",
    "OpaqueTokenGenerator",
    "PasswordHashingService",
]
