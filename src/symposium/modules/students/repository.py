"""
Student Repository

Database operations for student profiles. Every update is a whole-field
overwrite; the last writer wins.
"""

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.modules.approvals import ApprovalStatus
from symposium.modules.students.models import PaymentStatus, Student

logger = logging.getLogger(__name__)


async def create(
    db: AsyncSession,
    *,
    user_id: UUID,
    first_name: str,
    last_name: str,
    email: str,
    grade: str,
    school_id: UUID,
    school_name: str,
    advisor_id: UUID,
    **project: Any,
) -> Student:
    """Add a pending student profile to the session (flush only)."""
    student = Student(
        id=user_id,
        first_name=first_name,
        last_name=last_name,
        email=email,
        grade=grade,
        school_id=school_id,
        school_name=school_name,
        advisor_id=advisor_id,
        status=ApprovalStatus.PENDING,
        payment_status=PaymentStatus.NOT_RECEIVED,
        **project,
    )
    db.add(student)
    await db.flush()

    logger.info(f"Created student profile: {student.id} (advisor {advisor_id})")
    return student


async def get_by_id(db: AsyncSession, student_id: UUID) -> Student | None:
    return await db.get(Student, student_id)


async def list_by_advisor(db: AsyncSession, advisor_id: UUID) -> list[Student]:
    result = await db.execute(
        select(Student)
        .where(Student.advisor_id == advisor_id)
        .order_by(Student.last_name, Student.first_name)
    )
    return list(result.scalars().all())


async def list_all(
    db: AsyncSession,
    *,
    status: ApprovalStatus | None = None,
    src_requested: bool | None = None,
) -> list[Student]:
    query = select(Student)
    if status is not None:
        query = query.where(Student.status == status)
    if src_requested is not None:
        query = query.where(Student.src_approval_requested == src_requested)
    query = query.order_by(Student.created_at.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def update(
    db: AsyncSession, student: Student, *, commit: bool = True, **fields: Any
) -> Student:
    """
    Overwrite the given fields.

    With `commit=False` the change is only flushed, leaving the caller to
    commit it together with later writes.
    """
    for key, value in fields.items():
        setattr(student, key, value)
    if not commit:
        await db.flush()
        return student
    await db.commit()
    await db.refresh(student)
    return student


async def set_status(db: AsyncSession, student: Student, status: ApprovalStatus) -> Student:
    """Write the advisor's decision. `approved_at` is stamped on approval."""
    student.status = status
    student.approved_at = datetime.now(UTC) if status == ApprovalStatus.APPROVED else None
    await db.commit()
    await db.refresh(student)

    logger.info(f"Student {student.id} status set to {status.value}")
    return student


async def update_email(db: AsyncSession, student: Student, email: str) -> None:
    student.email = email
    await db.flush()


async def count_by_status(db: AsyncSession) -> dict[str, int]:
    """Student counts for the admin dashboard."""
    query = select(
        func.count(Student.id).label("total"),
        func.count(case((Student.status == ApprovalStatus.PENDING, 1))).label("pending"),
        func.count(case((Student.status == ApprovalStatus.APPROVED, 1))).label("approved"),
        func.count(case((Student.status == ApprovalStatus.REJECTED, 1))).label("rejected"),
        func.count(case((Student.payment_status == PaymentStatus.RECEIVED, 1))).label(
            "payment_received"
        ),
        func.count(
            case(
                (
                    (Student.src_approval_requested.is_(True)) & (Student.src_approved.is_(None)),
                    1,
                )
            )
        ).label("src_pending"),
    )
    row = (await db.execute(query)).one()
    return {
        "total": row.total,
        "pending": row.pending,
        "approved": row.approved,
        "rejected": row.rejected,
        "payment_received": row.payment_received,
        "src_pending": row.src_pending,
    }
