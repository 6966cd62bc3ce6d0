"""EduWise Auth - Generic authentication infrastructure.

This package provides authentication infrastructure that is independent
of the user domain. It handles:
- Password hashing (bcrypt)
- JWT access/refresh token creation and verification
- Opaque token generation for email verification and password reset

Architecture:
    eduwise_auth/
    ├── services/           # Pure logic (password hashing, JWT, opaque tokens)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from eduwise_auth import JWTService, OpaqueTokenGenerator, PasswordHashingService
"""

from eduwise_auth.exceptions import (
    AuthError,
    ExpiredTokenError,
    InvalidTokenError,
    WeakPasswordError,
)
from eduwise_auth.schemas import OpaqueToken, TokenPair, TokenPayload
from eduwise_auth.services import (
    JWTService,
    OpaqueTokenGenerator,
    PasswordHashingService,
)

__all__ = [
    # Services
    "JWTService",
    "OpaqueTokenGenerator",
    "PasswordHashingService",
    # Schemas
    "OpaqueToken",
    "TokenPair",
    "TokenPayload",
    # Exceptions
    "AuthError",
    "ExpiredTokenError",
    "InvalidTokenError",
    "WeakPasswordError",
]
