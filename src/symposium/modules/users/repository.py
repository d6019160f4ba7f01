"""
User Repository

Database operations for user accounts.
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.roles import UserRole
from symposium.modules.users.models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        role: UserRole,
        verification_code: str | None = None,
        verification_code_expiry: datetime | None = None,
        email_verified: bool = False,
    ) -> User:
        """
        Create a new user record.

        The record is flushed, not committed, so the caller can create the
        matching profile in the same transaction.
        """
        user = User(
            email=email,
            password_hash=password_hash,
            role=role,
            email_verified=email_verified,
            verification_code=verification_code,
            verification_code_expiry=verification_code_expiry,
        )

        db.add(user)
        await db.flush()

        logger.info(f"Created user: {user.id} ({role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: UUID) -> User | None:
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Get a user by email address (case-insensitive)."""
        result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def list_by_roles(db: AsyncSession, roles: list[UserRole]) -> list[User]:
        result = await db.execute(select(User).where(User.role.in_(roles)))
        return list(result.scalars().all())

    @staticmethod
    async def update(db: AsyncSession, user: User, **fields) -> User:
        """Overwrite the given fields and commit."""
        for key, value in fields.items():
            setattr(user, key, value)
        await db.commit()
        await db.refresh(user)
        return user
