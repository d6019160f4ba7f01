"""
Advisor Repository

Database operations for advisor (SRA) profiles.
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.modules.advisors.models import Advisor
from symposium.modules.approvals import ApprovalStatus

logger = logging.getLogger(__name__)


async def create(
    db: AsyncSession,
    *,
    user_id: UUID,
    first_name: str,
    last_name: str,
    email: str,
    school_id: UUID,
    school_name: str,
    phone: str | None = None,
    title: str | None = None,
) -> Advisor:
    """Add a pending advisor profile to the session (flush only)."""
    advisor = Advisor(
        id=user_id,
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        title=title,
        school_id=school_id,
        school_name=school_name,
        approval_status=ApprovalStatus.PENDING,
    )
    db.add(advisor)
    await db.flush()

    logger.info(f"Created advisor profile: {advisor.id} at school {school_id}")
    return advisor


async def get_by_id(db: AsyncSession, advisor_id: UUID) -> Advisor | None:
    return await db.get(Advisor, advisor_id)


async def list_by_school(
    db: AsyncSession, school_id: UUID, *, approved_only: bool = False
) -> list[Advisor]:
    """Advisors of a school, ordered by last name."""
    query = select(Advisor).where(Advisor.school_id == school_id)
    if approved_only:
        query = query.where(Advisor.approval_status == ApprovalStatus.APPROVED)
    query = query.order_by(Advisor.last_name, Advisor.first_name)

    result = await db.execute(query)
    return list(result.scalars().all())


async def list_all(db: AsyncSession, status: ApprovalStatus | None = None) -> list[Advisor]:
    query = select(Advisor)
    if status is not None:
        query = query.where(Advisor.approval_status == status)
    query = query.order_by(Advisor.created_at.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def set_approval_status(
    db: AsyncSession, advisor: Advisor, status: ApprovalStatus
) -> Advisor:
    """Overwrite the approval status unconditionally and commit."""
    advisor.approval_status = status
    await db.commit()
    await db.refresh(advisor)

    logger.info(f"Advisor {advisor.id} approval status set to {status.value}")
    return advisor


async def save_chaperone(db: AsyncSession, advisor: Advisor, chaperone: dict) -> Advisor:
    """Replace the embedded chaperone record and commit."""
    advisor.chaperone = chaperone
    await db.commit()
    await db.refresh(advisor)
    return advisor


async def update_email(db: AsyncSession, advisor: Advisor, email: str) -> None:
    """Change the contact email. Not committed."""
    advisor.email = email
    await db.flush()


async def count_by_status(db: AsyncSession) -> dict[str, int]:
    """Counts keyed by approval status value, plus `total`."""
    result = await db.execute(
        select(Advisor.approval_status, func.count(Advisor.id)).group_by(Advisor.approval_status)
    )
    counts = {status.value: 0 for status in ApprovalStatus}
    for status, count in result.all():
        counts[status.value] = count
    counts["total"] = sum(counts.values())
    return counts
