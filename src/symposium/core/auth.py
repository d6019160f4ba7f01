"""
Authentication and Authorization Module

FastAPI dependencies that validate the JWT bearer token and enforce role
based access. Tokens are issued by the login endpoint.
"""

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from symposium.core.roles import ADMIN_ROLES, UserRole
from symposium.core.security import decode_token

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)


@dataclass
class CurrentUser:
    """
    Represents an authenticated user.

    Populated from JWT claims after token validation.
    """

    id: UUID
    email: str
    role: UserRole

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, email={self.email}, role={self.role.value})"


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def user_from_token(token: str) -> CurrentUser:
    """
    Validate a JWT and build the user it identifies.

    Raises:
        HTTPException 401: If the token is invalid, expired or has bad claims
    """
    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type", "access") != "access":
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        return CurrentUser(
            id=UUID(payload["sub"]),
            email=payload.get("email", ""),
            role=UserRole(payload["role"]),
        )
    except (KeyError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """FastAPI dependency returning the authenticated user."""
    user = user_from_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id} ({user.role.value})")
    return user


def require_roles(
    *roles: UserRole,
) -> Callable[..., Coroutine[Any, Any, CurrentUser]]:
    """
    Build a dependency that only admits users holding one of `roles`.

    Usage:
        @router.get("/students")
        async def list_students(user: CurrentUser = Depends(require_roles(UserRole.ADVISOR))):
            ...
    """
    allowed = frozenset(roles)

    async def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            logger.warning(
                f"Access denied: user {user.id} has role '{user.role.value}', "
                f"requires one of {sorted(r.value for r in allowed)}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "FORBIDDEN_ROLE",
                    "message": "You do not have access to this resource.",
                },
            )
        return user

    return dependency


require_admin = require_roles(*ADMIN_ROLES)
require_advisor = require_roles(UserRole.ADVISOR)
require_student = require_roles(UserRole.STUDENT)


__all__ = [
    "CurrentUser",
    "get_current_user",
    "require_roles",
    "require_admin",
    "require_advisor",
    "require_student",
    "user_from_token",
]
