"""
Authentication Router

Login, the current-user summary, and the email verification endpoints.

Endpoints:
- POST /auth/login - Exchange email and password for an access token
- GET /auth/me - Current account summary and dashboard path
- POST /auth/verify-email - Submit the six-digit verification code
- POST /resend-verification - Email a fresh verification code
- POST /change-email - Correct the address of an unverified account

Security:
- resend-verification and change-email are rate limited per user
- Callers may only act on their own account
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.auth import CurrentUser, get_current_user
from symposium.core.context import AppContext, get_context
from symposium.core.database import get_db
from symposium.core.errors import ServiceError, internal_error, to_http_exception
from symposium.core.rate_limit import enforce_rate_limit
from symposium.modules.users import service
from symposium.modules.users.schemas import (
    ChangeEmailRequest,
    LoginRequest,
    LoginResponse,
    ResendVerificationRequest,
    SuccessResponse,
    UserMeResponse,
    VerifyEmailRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# 3 emails per user per hour
EMAIL_RATE_LIMIT = 3
EMAIL_RATE_WINDOW_SECONDS = 3600


def _ensure_self(user: CurrentUser, user_id: UUID) -> None:
    if user.id != user_id:
        logger.warning(f"User {user.id} attempted to act on account {user_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "FORBIDDEN",
                "message": "You can only manage your own account.",
            },
        )


@router.post("/auth/login", response_model=LoginResponse, summary="Log In")
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> LoginResponse:
    """
    Authenticate a user and return a JWT access token.

    Raises:
        HTTPException 401: Invalid credentials
    """
    try:
        return await service.login(
            db,
            credentials.email,
            credentials.password,
            expires_minutes=context.settings.access_token_expire_minutes,
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error during login: {e}")
        raise internal_error() from e


@router.get("/auth/me", response_model=UserMeResponse, summary="Current User")
async def get_me(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserMeResponse:
    try:
        return await service.get_me(db, user.id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error loading profile for {user.id}: {e}")
        raise internal_error() from e


@router.post("/auth/verify-email", response_model=SuccessResponse, summary="Verify Email")
async def verify_email(
    data: VerifyEmailRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """
    Verify the account's email with the code that was sent to it.

    Raises:
        HTTPException 400: Wrong or expired code, or already verified
        HTTPException 404: Account no longer exists
    """
    try:
        await service.verify_email(db, user.id, data.code)
        return SuccessResponse(message="Email verified successfully.")
    except ServiceError as e:
        logger.warning(f"Email verification failed for {user.id}: {e.error_code}")
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error verifying email for {user.id}: {e}")
        raise internal_error() from e


@router.post(
    "/resend-verification",
    response_model=SuccessResponse,
    summary="Resend Verification Code",
    responses={
        429: {"description": "Too many requests"},
        500: {"description": "Email could not be sent"},
    },
)
async def resend_verification(
    data: ResendVerificationRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> SuccessResponse:
    """
    Send a new verification code to the account's address.

    Raises:
        HTTPException 400: Already verified
        HTTPException 403: Not the caller's account
        HTTPException 404: Unknown user
        HTTPException 429: Rate limit exceeded
        HTTPException 500: Email delivery failed
    """
    _ensure_self(user, data.user_id)
    await enforce_rate_limit(
        context.redis,
        f"resend_verification:{data.user_id}",
        EMAIL_RATE_LIMIT,
        EMAIL_RATE_WINDOW_SECONDS,
    )

    try:
        await service.resend_verification(
            db,
            context.mailer,
            data.user_id,
            code_expiry_hours=context.settings.verification_code_expiry_hours,
        )
        return SuccessResponse(message="Verification code sent.")
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error resending verification: {e}")
        raise internal_error() from e


@router.post(
    "/change-email",
    response_model=SuccessResponse,
    summary="Change Unverified Email",
    responses={
        409: {"description": "Address already registered"},
        429: {"description": "Too many requests"},
    },
)
async def change_email(
    data: ChangeEmailRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> SuccessResponse:
    """
    Replace the email of an account that has not been verified yet.

    A new verification code is sent to the new address.
    """
    _ensure_self(user, data.user_id)
    await enforce_rate_limit(
        context.redis,
        f"change_email:{data.user_id}",
        EMAIL_RATE_LIMIT,
        EMAIL_RATE_WINDOW_SECONDS,
    )

    try:
        await service.change_email(
            db,
            context.mailer,
            data.user_id,
            data.new_email,
            code_expiry_hours=context.settings.verification_code_expiry_hours,
        )
        return SuccessResponse(
            message="Email updated and verification code sent to new email address"
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error changing email: {e}")
        raise internal_error() from e
