"""User profile and administration router."""

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from eduwise.domain.shared import DomainException
from eduwise.presentation.api.dependencies import (
    AdminUser,
    CurrentUser,
    CurrentUserContext,
    DBSession,
    StaffUser,
    get_password_service,
)
from eduwise.presentation.api.schemas.common import ApiResponse, ErrorResponse
from eduwise.presentation.api.schemas.users import (
    CreateUserRequest,
    UpdateRoleRequest,
    UpdateUserRequest,
    UserData,
    UserListData,
    UserResponse,
)
from eduwise_auth import PasswordHashingService
from eduwise_identity import UserRole
from eduwise_identity.application.commands import (
    CreateUserCommand,
    DeleteUserCommand,
    UpdateUserProfileCommand,
    UpdateUserRoleCommand,
)
from eduwise_identity.application.queries import GetUserQuery, ListUsersQuery
from eduwise_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

PasswordService = Annotated[PasswordHashingService, Depends(get_password_service)]

router = APIRouter()

ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Not allowed for this role"},
    404: {"model": ErrorResponse, "description": "User not found"},
}


@router.get("/me", summary="Get the current user", responses=ERROR_RESPONSES)
async def get_me(current_user: CurrentUser) -> ApiResponse[UserData]:
    return ApiResponse(
        message="User retrieved successfully",
        data=UserData(user=UserResponse.from_user(current_user)),
    )


@router.get(
    "",
    summary="List users (admin or instructor)",
    responses=ERROR_RESPONSES,
)
async def list_users(
    _staff: StaffUser,  # Used for authorization check
    session: DBSession,
    role: Optional[UserRole] = None,
) -> ApiResponse[UserListData]:
    users = await ListUsersQuery(UserRepositorySQLAlchemy(session)).execute(role=role)
    return ApiResponse(
        message="Users retrieved successfully",
        data=UserListData(
            count=len(users),
            users=[UserResponse.from_user(u) for u in users],
        ),
    )


@router.get(
    "/{user_id}",
    summary="Get a user (self, admin or instructor)",
    responses=ERROR_RESPONSES,
)
async def get_user(
    user_id: UUID,
    actor: CurrentUserContext,
    session: DBSession,
) -> ApiResponse[UserData]:
    user = await GetUserQuery(UserRepositorySQLAlchemy(session)).execute(
        user_id,
        actor,
    )
    return ApiResponse(
        message="User retrieved successfully",
        data=UserData(user=UserResponse.from_user(user)),
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a user (admin)",
    responses={
        **ERROR_RESPONSES,
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def create_user(
    request: CreateUserRequest,
    admin: AdminUser,
    session: DBSession,
    password_service: PasswordService,
) -> ApiResponse[UserData]:
    """Create a user with any role. The account starts out verified."""
    command = CreateUserCommand(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
    )
    try:
        user = await command.execute(
            full_name=request.full_name,
            email=request.email,
            password=request.password,
            role=request.role,
        )
        await session.commit()
    except DomainException:
        await session.rollback()
        raise

    logger.info("Admin %s created user: %s", admin.email, user.email)
    return ApiResponse(
        message="User created successfully",
        data=UserData(user=UserResponse.from_user(user)),
    )


@router.put(
    "/{user_id}",
    summary="Update a profile (self or admin)",
    responses=ERROR_RESPONSES,
)
async def update_user(
    user_id: UUID,
    request: UpdateUserRequest,
    actor: CurrentUserContext,
    session: DBSession,
) -> ApiResponse[UserData]:
    """
    Update name or email.

    Sending a role different from the current one is rejected; roles are
    changed through ``PUT /users/{user_id}/role``.
    """
    command = UpdateUserProfileCommand(UserRepositorySQLAlchemy(session))
    try:
        user = await command.execute(
            user_id=user_id,
            actor=actor,
            full_name=request.full_name,
            email=request.email,
            role=request.role,
        )
        await session.commit()
    except DomainException:
        await session.rollback()
        raise

    return ApiResponse(
        message="User updated successfully",
        data=UserData(user=UserResponse.from_user(user)),
    )


@router.put(
    "/{user_id}/role",
    summary="Change a user's role (admin)",
    responses=ERROR_RESPONSES,
)
async def update_user_role(
    user_id: UUID,
    request: UpdateRoleRequest,
    admin: AdminUser,
    session: DBSession,
) -> ApiResponse[UserData]:
    command = UpdateUserRoleCommand(UserRepositorySQLAlchemy(session))
    try:
        user = await command.execute(
            user_id=user_id,
            new_role=request.role,
            requesting_admin_id=admin.id,
        )
        await session.commit()
    except DomainException:
        await session.rollback()
        raise

    logger.info(
        "Admin %s changed role of %s to %s",
        admin.email,
        user.email,
        user.role.value,
    )
    return ApiResponse(
        message="User role updated successfully",
        data=UserData(user=UserResponse.from_user(user)),
    )


@router.delete(
    "/{user_id}",
    summary="Delete a user (admin)",
    responses=ERROR_RESPONSES,
)
async def delete_user(
    user_id: UUID,
    admin: AdminUser,
    session: DBSession,
) -> ApiResponse[None]:
    command = DeleteUserCommand(UserRepositorySQLAlchemy(session))
    try:
        await command.execute(user_id=user_id, requesting_admin_id=admin.id)
        await session.commit()
    except DomainException:
        await session.rollback()
        raise

    logger.info("Admin %s deleted user: %s", admin.email, user_id)
    return ApiResponse(message="User deleted successfully")
