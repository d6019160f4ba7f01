"""
User Service Layer

Account lifecycle: registration of the login identity, email verification,
verification resend, email change before verification, and login.

Verification codes are six digits, valid for a configurable number of hours
(24 by default), and are never logged.
"""

import logging
import re
import secrets
from datetime import UTC, datetime, timedelta
from typing import assert_never
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.email import Mailer
from symposium.core.errors import (
    ConflictError,
    EmailDeliveryError,
    NotFoundError,
    ServiceError,
    ValidationFailedError,
)
from symposium.core.roles import ProfileKind, UserRole, dashboard_path, profile_kind
from symposium.core.security import create_access_token, hash_password, verify_password
from symposium.modules.advisors import repository as advisor_repository
from symposium.modules.judges import repository as judge_repository
from symposium.modules.students import repository as student_repository
from symposium.modules.users.models import User
from symposium.modules.users.profiles import Profile, display_name, load_profile
from symposium.modules.users.repository import UserRepository
from symposium.modules.users.schemas import LoginResponse, UserMeResponse

logger = logging.getLogger(__name__)

# Same shape check the registration forms apply
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class DuplicateEmailError(ConflictError):
    def __init__(self):
        super().__init__(
            message="An account with this email address already exists.",
            error_code="EMAIL_IN_USE",
        )


class AlreadyVerifiedError(ValidationFailedError):
    def __init__(self, message: str = "Email is already verified."):
        super().__init__(message=message, error_code="ALREADY_VERIFIED")


class InvalidCodeError(ValidationFailedError):
    def __init__(self, message: str = "Invalid verification code."):
        super().__init__(message=message, error_code="INVALID_CODE")


class InvalidCredentialsError(ServiceError):
    def __init__(self):
        super().__init__(
            message="Invalid email or password.",
            error_code="INVALID_CREDENTIALS",
            status_code=401,
        )


def generate_verification_code() -> str:
    """Random six-digit code, never starting with zero."""
    return str(100000 + secrets.randbelow(900000))


def _code_expiry(expiry_hours: int) -> datetime:
    return datetime.now(UTC) + timedelta(hours=expiry_hours)


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ============================================
# Registration
# ============================================


async def create_account(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    role: UserRole,
    code_expiry_hours: int,
) -> tuple[User, str]:
    """
    Create the login identity for a new registration.

    The user is flushed but not committed so the caller can add the role
    profile in the same transaction.

    Returns:
        The new user and its verification code

    Raises:
        DuplicateEmailError: If the address is already registered
    """
    email = normalize_email(email)
    if await UserRepository.email_exists(db, email):
        raise DuplicateEmailError()

    code = generate_verification_code()
    user = await UserRepository.create(
        db,
        email=email,
        password_hash=hash_password(password),
        role=role,
        verification_code=code,
        verification_code_expiry=_code_expiry(code_expiry_hours),
    )
    return user, code


# ============================================
# Verification
# ============================================


async def verify_email(db: AsyncSession, user_id: UUID, code: str) -> User:
    """
    Check a verification code and mark the account verified.

    Raises:
        NotFoundError: Unknown user
        AlreadyVerifiedError: Account already verified
        InvalidCodeError: Wrong or expired code
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", "USER_NOT_FOUND")

    if user.email_verified:
        raise AlreadyVerifiedError()

    if not user.verification_code or not secrets.compare_digest(user.verification_code, code):
        raise InvalidCodeError()

    expiry = user.verification_code_expiry
    if expiry is not None and expiry < datetime.now(UTC):
        raise InvalidCodeError("Verification code has expired. Please request a new one.")

    user = await UserRepository.update(
        db,
        user,
        email_verified=True,
        verification_code=None,
        verification_code_expiry=None,
    )
    logger.info(f"Email verified for user {user.id}")
    return user


async def resend_verification(
    db: AsyncSession,
    mailer: Mailer,
    user_id: UUID,
    *,
    code_expiry_hours: int,
) -> None:
    """
    Issue a fresh verification code and email it.

    The new code is stored only after the email was accepted, so a failed
    send leaves the previous code valid.

    Raises:
        NotFoundError: Unknown user
        AlreadyVerifiedError: Nothing to verify
        EmailDeliveryError: Email could not be sent
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", "USER_NOT_FOUND")

    if user.email_verified:
        raise AlreadyVerifiedError()

    profile = await load_profile(db, user)
    code = generate_verification_code()

    sent = await mailer.send_verification_code(user.email, display_name(user, profile), code)
    if not sent:
        raise EmailDeliveryError("Failed to send verification email.")

    await UserRepository.update(
        db,
        user,
        verification_code=code,
        verification_code_expiry=_code_expiry(code_expiry_hours),
    )
    logger.info(f"Verification code re-sent for user {user.id}")


async def _update_profile_email(db: AsyncSession, user: User, profile: Profile, email: str) -> None:
    kind = profile_kind(user.role)
    match kind:
        case ProfileKind.ADVISOR:
            await advisor_repository.update_email(db, profile, email)
        case ProfileKind.STUDENT:
            await student_repository.update_email(db, profile, email)
        case ProfileKind.JUDGE:
            await judge_repository.update_email(db, profile, email)
        case None:
            pass
        case _:
            assert_never(kind)


async def change_email(
    db: AsyncSession,
    mailer: Mailer,
    user_id: UUID,
    new_email: str,
    *,
    code_expiry_hours: int,
) -> User:
    """
    Replace the address of an unverified account and send a new code there.

    The role profile's contact email is updated alongside the account.

    Raises:
        ValidationFailedError: Malformed address
        NotFoundError: Unknown user
        AlreadyVerifiedError: Verified accounts cannot change email here
        DuplicateEmailError: Address belongs to another account
        EmailDeliveryError: Email could not be sent; nothing was changed
    """
    new_email = normalize_email(new_email)
    if not EMAIL_PATTERN.match(new_email):
        raise ValidationFailedError("Invalid email format", "INVALID_EMAIL")

    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", "USER_NOT_FOUND")

    if user.email_verified:
        raise AlreadyVerifiedError("Email already verified. Cannot change email.")

    existing = await UserRepository.get_by_email(db, new_email)
    if existing is not None and existing.id != user.id:
        raise DuplicateEmailError()

    profile = await load_profile(db, user)
    code = generate_verification_code()

    sent = await mailer.send_verification_code(new_email, display_name(user, profile), code)
    if not sent:
        raise EmailDeliveryError("Failed to send verification email.")

    if profile is not None:
        await _update_profile_email(db, user, profile, new_email)

    user = await UserRepository.update(
        db,
        user,
        email=new_email,
        email_verified=False,
        verification_code=code,
        verification_code_expiry=_code_expiry(code_expiry_hours),
    )
    logger.info(f"Email changed for user {user.id}")
    return user


# ============================================
# Login
# ============================================


async def login(
    db: AsyncSession, email: str, password: str, *, expires_minutes: int
) -> LoginResponse:
    """
    Authenticate with email and password.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
    """
    user = await UserRepository.get_by_email(db, normalize_email(email))
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise InvalidCredentialsError()

    token = create_access_token(
        str(user.id),
        additional_claims={"email": user.email, "role": user.role.value},
        expires_minutes=expires_minutes,
    )
    logger.info(f"User {user.id} logged in ({user.role.value})")

    return LoginResponse(
        access_token=token,
        expires_in=expires_minutes * 60,
        user_id=user.id,
        role=user.role,
        email_verified=user.email_verified,
        dashboard_path=dashboard_path(user.role),
    )


async def get_me(db: AsyncSession, user_id: UUID) -> UserMeResponse:
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", "USER_NOT_FOUND")

    profile = await load_profile(db, user)
    return UserMeResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        email_verified=user.email_verified,
        dashboard_path=dashboard_path(user.role),
        name=profile.full_name if profile is not None else None,
    )
