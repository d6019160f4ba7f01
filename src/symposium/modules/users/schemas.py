"""
User and Auth Schemas

Pydantic schemas for login, verification and email change.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from symposium.core.roles import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user_id: UUID
    role: UserRole
    email_verified: bool
    dashboard_path: str


class UserMeResponse(BaseModel):
    """Authenticated user's account summary."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: UserRole
    email_verified: bool
    dashboard_path: str
    name: str | None = None


class VerifyEmailRequest(BaseModel):
    code: str = Field(..., pattern=r"^\d{6}$")


class ResendVerificationRequest(BaseModel):
    user_id: UUID


class ChangeEmailRequest(BaseModel):
    user_id: UUID
    # Validated in the service so a bad address is reported as a 400
    new_email: str = Field(..., min_length=1, max_length=255)


class SuccessResponse(BaseModel):
    success: bool = True
    message: str | None = None
