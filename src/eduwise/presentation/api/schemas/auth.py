"""Authentication schemas for request/response models."""

from typing import Optional

from pydantic import ConfigDict, EmailStr, Field

from eduwise.presentation.api.schemas.common import CamelModel
from eduwise.presentation.api.schemas.users import UserResponse
from eduwise_auth import TokenPair


class RegisterRequest(CamelModel):
    """Request schema for user registration.

    Password rules are enforced by the service so that every violation
    comes back with its own error code.
    """

    full_name: str = Field(..., description="User's full name")
    email: EmailStr = Field(..., description="User's email address")
    password: str
    password_confirm: str
    role: Optional[str] = Field(
        default=None,
        description="Only 'user' is accepted; other roles are granted by admins",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "fullName": "Ada Lovelace",
                "email": "user@example.com",
                "password": "securepassword123",
                "passwordConfirm": "securepassword123",
            },
        },
    )


class LoginRequest(CamelModel):
    """Request schema for user login."""

    email: EmailStr
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "securepassword123",
            },
        },
    )


class EmailRequest(CamelModel):
    """Request schema for resend-verification and forgot-password."""

    email: EmailStr


class ResetPasswordRequest(CamelModel):
    """Request schema for resetting a password with a token from the URL."""

    password: str
    password_confirm: str


class RefreshRequest(CamelModel):
    """Request schema for token refresh."""

    refresh_token: str


class TokenResponse(CamelModel):
    """Response schema for a token pair."""

    access_token: str
    refresh_token: str
    token_type: str = Field(default="bearer")
    expires_in: int

    @classmethod
    def from_pair(cls, tokens: TokenPair) -> "TokenResponse":
        return cls(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.access_expires_in,
        )


class AuthData(TokenResponse):
    """Login payload: the user plus a fresh token pair."""

    user: UserResponse
