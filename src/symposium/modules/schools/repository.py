"""
School Repository

Database operations for participating schools.
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.modules.schools.models import School

logger = logging.getLogger(__name__)


class SchoolRepository:
    """Repository for school database operations."""

    @staticmethod
    async def create(db: AsyncSession, *, name: str, address: str | None = None) -> School:
        """
        Create a new school record.

        Flushed, not committed: schools are created as part of an advisor
        registration.
        """
        school = School(name=name.strip(), address=address)
        db.add(school)
        await db.flush()

        logger.info(f"Created school: {school.id} ({school.name})")
        return school

    @staticmethod
    async def get_by_id(db: AsyncSession, school_id: UUID) -> School | None:
        return await db.get(School, school_id)

    @staticmethod
    async def get_by_name(db: AsyncSession, name: str) -> School | None:
        """Get a school by exact name (case-insensitive, surrounding whitespace ignored)."""
        result = await db.execute(
            select(School).where(func.lower(School.name) == name.strip().lower()).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def search(db: AsyncSession, query: str | None = None, limit: int = 50) -> list[School]:
        """List schools, optionally filtered by a case-insensitive name prefix."""
        stmt = select(School)
        if query:
            stmt = stmt.where(School.name.ilike(f"{query.strip()}%"))
        stmt = stmt.order_by(School.name).limit(limit)

        result = await db.execute(stmt)
        return list(result.scalars().all())
