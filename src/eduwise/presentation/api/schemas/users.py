"""User schemas for profile and administration endpoints."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, EmailStr, Field

from eduwise.presentation.api.schemas.common import CamelModel
from eduwise_identity import User, UserRole


class UserResponse(CamelModel):
    """Public view of a user. Hashes and tokens are never included."""

    id: UUID
    full_name: str
    email: str
    role: UserRole
    email_verified: bool
    login_streak: int
    last_login_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            full_name=user.full_name,
            email=user.email,
            role=user.role,
            email_verified=user.email_verified,
            login_streak=user.login_streak,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
        )


class UserData(CamelModel):
    user: UserResponse


class UserListData(CamelModel):
    count: int
    users: list[UserResponse]


class CreateUserRequest(CamelModel):
    """Request schema for an admin creating a user."""

    full_name: str
    email: EmailStr
    password: str
    role: UserRole = UserRole.USER

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "fullName": "Ada Lovelace",
                "email": "ada@example.com",
                "password": "securepassword123",
                "role": "instructor",
            },
        },
    )


class UpdateUserRequest(CamelModel):
    """Request schema for updating a profile.

    ``role`` is only accepted when it equals the current role.
    """

    full_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    role: Optional[str] = None


class UpdateRoleRequest(CamelModel):
    """Request schema for updating a user's role."""

    role: UserRole
