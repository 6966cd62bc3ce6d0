"""Authentication router: registration, verification, sessions, password reset."""

import logging

from fastapi import APIRouter, status

from eduwise.domain.shared import DependencyFailureError, DomainException
from eduwise.presentation.api.dependencies import (
    CurrentUser,
    DBSession,
    IdentityService,
)
from eduwise.presentation.api.schemas.auth import (
    AuthData,
    EmailRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from eduwise.presentation.api.schemas.common import ApiResponse, ErrorResponse
from eduwise.presentation.api.schemas.users import UserData, UserResponse
from eduwise_identity import TokenExpiredError

logger = logging.getLogger(__name__)

router = APIRouter()

# Same body for known and unknown addresses
FORGOT_PASSWORD_MESSAGE = (
    "If an account with that email exists, a password reset link has been sent."
)
RESEND_VERIFICATION_MESSAGE = (
    "If an unverified account with that email exists, "
    "a new verification link has been sent."
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input or token"},
    401: {"model": ErrorResponse, "description": "Not authenticated"},
}


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        **ERROR_RESPONSES,
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def register(
    request: RegisterRequest,
    identity_service: IdentityService,
    session: DBSession,
) -> ApiResponse[UserData]:
    """
    Register a new account with the default ``user`` role.

    A verification link is emailed; the account cannot log in until the
    email is verified.
    """
    try:
        user = await identity_service.register(
            full_name=request.full_name,
            email=request.email,
            password=request.password,
            password_confirm=request.password_confirm,
            role=request.role,
        )
        await session.commit()
    except DomainException:
        await session.rollback()
        raise

    return ApiResponse(
        message=(
            "Registration successful! Please check your email to verify "
            "your account."
        ),
        data=UserData(user=UserResponse.from_user(user)),
    )


@router.get(
    "/verify-email/{token}",
    summary="Verify an email address",
    responses=ERROR_RESPONSES,
)
async def verify_email(
    token: str,
    identity_service: IdentityService,
    session: DBSession,
) -> ApiResponse[None]:
    try:
        await identity_service.verify_email(token)
        await session.commit()
    except TokenExpiredError:
        # The expired token was cleared; keep that
        await session.commit()
        raise
    except DomainException:
        await session.rollback()
        raise

    return ApiResponse(message="Email verified successfully")


@router.post(
    "/login",
    summary="Authenticate user",
    responses={
        **ERROR_RESPONSES,
        403: {"model": ErrorResponse, "description": "Email not verified"},
    },
)
async def login(
    request: LoginRequest,
    identity_service: IdentityService,
    session: DBSession,
) -> ApiResponse[AuthData]:
    """
    Authenticate with email and password.

    Returns the user with a new access/refresh token pair. Any refresh
    token issued earlier stops working.
    """
    try:
        result = await identity_service.login(
            email=request.email,
            password=request.password,
        )
        await session.commit()
    except DomainException:
        await session.rollback()
        raise

    tokens = TokenResponse.from_pair(result.tokens)
    return ApiResponse(
        message="Login successful",
        data=AuthData(
            user=UserResponse.from_user(result.user),
            **tokens.model_dump(),
        ),
    )


@router.post(
    "/resend-verification",
    summary="Resend the verification email",
    responses=ERROR_RESPONSES,
)
async def resend_verification(
    request: EmailRequest,
    identity_service: IdentityService,
    session: DBSession,
) -> ApiResponse[None]:
    try:
        await identity_service.resend_verification(request.email)
        await session.commit()
    except DomainException:
        await session.rollback()
        raise

    return ApiResponse(message=RESEND_VERIFICATION_MESSAGE)


@router.post(
    "/forgot-password",
    summary="Request a password reset email",
    responses={
        **ERROR_RESPONSES,
        500: {"model": ErrorResponse, "description": "Email could not be sent"},
    },
)
async def forgot_password(
    request: EmailRequest,
    identity_service: IdentityService,
    session: DBSession,
) -> ApiResponse[None]:
    """
    Request a password reset link.

    The response is identical whether or not the address is registered.
    """
    try:
        await identity_service.forgot_password(request.email)
        await session.commit()
    except DependencyFailureError:
        # The service already cleared the reset token it had set
        await session.commit()
        raise
    except DomainException:
        await session.rollback()
        raise

    return ApiResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.patch(
    "/reset-password/{token}",
    summary="Reset password with a token",
    responses=ERROR_RESPONSES,
)
async def reset_password(
    token: str,
    request: ResetPasswordRequest,
    identity_service: IdentityService,
    session: DBSession,
) -> ApiResponse[None]:
    try:
        await identity_service.reset_password(
            token=token,
            password=request.password,
            password_confirm=request.password_confirm,
        )
        await session.commit()
    except TokenExpiredError:
        await session.commit()
        raise
    except DomainException:
        await session.rollback()
        raise

    return ApiResponse(message="Password reset successful. You can now log in.")


@router.post(
    "/refresh",
    summary="Refresh access token",
    responses=ERROR_RESPONSES,
)
async def refresh_token(
    request: RefreshRequest,
    identity_service: IdentityService,
    session: DBSession,
) -> ApiResponse[TokenResponse]:
    """
    Exchange the current refresh token for a new pair.

    The presented refresh token is invalidated; presenting it again fails.
    """
    try:
        tokens = await identity_service.refresh(request.refresh_token)
        await session.commit()
    except DomainException:
        await session.rollback()
        raise

    return ApiResponse(
        message="Token refreshed successfully",
        data=TokenResponse.from_pair(tokens),
    )


@router.post(
    "/logout",
    summary="Log out",
    responses=ERROR_RESPONSES,
)
async def logout(
    current_user: CurrentUser,
    identity_service: IdentityService,
    session: DBSession,
) -> ApiResponse[None]:
    """Invalidate the stored refresh token. Calling it twice is harmless."""
    await identity_service.logout(current_user.id)
    await session.commit()
    return ApiResponse(message="Logged out successfully")
