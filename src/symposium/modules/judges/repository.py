"""
Judge Repository

Database operations for judge profiles.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.modules.approvals import ApprovalStatus
from symposium.modules.judges.models import Judge

logger = logging.getLogger(__name__)


async def create(db: AsyncSession, *, user_id: UUID, **fields: Any) -> Judge:
    """Add a pending judge profile to the session (flush only)."""
    judge = Judge(id=user_id, approval_status=ApprovalStatus.PENDING, **fields)
    db.add(judge)
    await db.flush()

    logger.info(f"Created judge profile: {judge.id}")
    return judge


async def get_by_id(db: AsyncSession, judge_id: UUID) -> Judge | None:
    return await db.get(Judge, judge_id)


async def list_all(db: AsyncSession, status: ApprovalStatus | None = None) -> list[Judge]:
    query = select(Judge)
    if status is not None:
        query = query.where(Judge.approval_status == status)
    query = query.order_by(Judge.created_at.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def set_approval_status(db: AsyncSession, judge: Judge, status: ApprovalStatus) -> Judge:
    judge.approval_status = status
    await db.commit()
    await db.refresh(judge)

    logger.info(f"Judge {judge.id} approval status set to {status.value}")
    return judge


async def update_email(db: AsyncSession, judge: Judge, email: str) -> None:
    judge.email = email
    await db.flush()


async def count_by_status(db: AsyncSession) -> dict[str, int]:
    """Counts keyed by approval status value, plus `total`."""
    result = await db.execute(
        select(Judge.approval_status, func.count(Judge.id)).group_by(Judge.approval_status)
    )
    counts = {status.value: 0 for status in ApprovalStatus}
    for status, count in result.all():
        counts[status.value] = count
    counts["total"] = sum(counts.values())
    return counts
