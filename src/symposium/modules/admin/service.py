"""
Admin Service Layer

Directors and managers review advisor and judge registrations, track
student payments and decide special review committee (SRC) requests.

Each approve or reject call is an unconditional overwrite of the status,
followed on approval by exactly one notification attempt. The notification
is not transactional with the write: a failed send is logged and reported
as `notification_sent=False`.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.email import Mailer
from symposium.core.errors import NotFoundError, ValidationFailedError
from symposium.modules.admin.schemas import (
    DashboardStats,
    DecisionResponse,
    PaymentResponse,
    SRCDecisionResponse,
    StatusCounts,
    StudentCounts,
)
from symposium.modules.advisors import repository as advisor_repository
from symposium.modules.advisors.schemas import AdvisorResponse
from symposium.modules.approvals import ApprovalStatus, SRCDecision, can_decide
from symposium.modules.judges import repository as judge_repository
from symposium.modules.judges.schemas import JudgeResponse
from symposium.modules.students import repository as student_repository
from symposium.modules.students.models import PaymentStatus
from symposium.modules.students.schemas import StudentSummary
from symposium.modules.students.service import get_student

logger = logging.getLogger(__name__)

SRC_OUTCOMES: dict[SRCDecision, bool | None] = {
    SRCDecision.APPROVED: True,
    SRCDecision.REJECTED: False,
    SRCDecision.UNDECIDED: None,
}


def _check_decision(current: ApprovalStatus, decision: ApprovalStatus) -> None:
    if not can_decide(current, decision):
        raise ValidationFailedError(f"Cannot set status to {decision.value}", "INVALID_DECISION")


# ============================================
# Listings
# ============================================


async def list_advisors(
    db: AsyncSession, status: ApprovalStatus | None = None
) -> list[AdvisorResponse]:
    advisors = await advisor_repository.list_all(db, status)
    return [AdvisorResponse.from_advisor(a) for a in advisors]


async def list_students(
    db: AsyncSession,
    status: ApprovalStatus | None = None,
    src_requested: bool | None = None,
) -> list[StudentSummary]:
    students = await student_repository.list_all(db, status=status, src_requested=src_requested)
    return [StudentSummary.from_student(s) for s in students]


async def list_judges(db: AsyncSession, status: ApprovalStatus | None = None) -> list[JudgeResponse]:
    judges = await judge_repository.list_all(db, status)
    return [JudgeResponse.model_validate(j) for j in judges]


async def get_dashboard_stats(db: AsyncSession) -> DashboardStats:
    advisors = await advisor_repository.count_by_status(db)
    judges = await judge_repository.count_by_status(db)
    students = await student_repository.count_by_status(db)
    return DashboardStats(
        advisors=StatusCounts(**advisors),
        judges=StatusCounts(**judges),
        students=StudentCounts(**students),
    )


# ============================================
# Approvals
# ============================================


async def decide_advisor(
    db: AsyncSession, mailer: Mailer, advisor_id: UUID, decision: ApprovalStatus
) -> DecisionResponse:
    """
    Approve or reject an advisor registration.

    Raises:
        NotFoundError: Unknown advisor
        ValidationFailedError: Decision is not approve or reject
    """
    advisor = await advisor_repository.get_by_id(db, advisor_id)
    if advisor is None:
        raise NotFoundError("Advisor", "ADVISOR_NOT_FOUND")
    _check_decision(advisor.approval_status, decision)

    advisor = await advisor_repository.set_approval_status(db, advisor, decision)

    notification_sent = False
    if decision == ApprovalStatus.APPROVED:
        notification_sent = await mailer.send_advisor_approved(
            advisor.email, advisor.full_name, advisor.school_name
        )
        if not notification_sent:
            logger.error(f"Approval email to advisor {advisor.id} failed; status kept")

    return DecisionResponse(
        id=advisor.id, status=advisor.approval_status, notification_sent=notification_sent
    )


async def decide_judge(
    db: AsyncSession, mailer: Mailer, judge_id: UUID, decision: ApprovalStatus
) -> DecisionResponse:
    judge = await judge_repository.get_by_id(db, judge_id)
    if judge is None:
        raise NotFoundError("Judge", "JUDGE_NOT_FOUND")
    _check_decision(judge.approval_status, decision)

    judge = await judge_repository.set_approval_status(db, judge, decision)

    notification_sent = False
    if decision == ApprovalStatus.APPROVED:
        notification_sent = await mailer.send_judge_approved(judge.email, judge.full_name)
        if not notification_sent:
            logger.error(f"Approval email to judge {judge.id} failed; status kept")

    return DecisionResponse(
        id=judge.id, status=judge.approval_status, notification_sent=notification_sent
    )


# ============================================
# Students
# ============================================


async def set_payment_status(
    db: AsyncSession, student_id: UUID, payment_status: PaymentStatus
) -> PaymentResponse:
    student = await get_student(db, student_id)
    student = await student_repository.update(db, student, payment_status=payment_status)

    logger.info(f"Payment status for student {student.id} set to {payment_status.value}")
    return PaymentResponse(student_id=student.id, payment_status=student.payment_status)


async def decide_src(
    db: AsyncSession,
    admin_id: UUID,
    student_id: UUID,
    decision: SRCDecision,
    notes: str | None = None,
) -> SRCDecisionResponse:
    """
    Record the SRC outcome. Independent of the student's main status.

    `undecided` clears a previous decision.
    """
    student = await get_student(db, student_id)
    outcome = SRC_OUTCOMES[decision]

    fields: dict = {
        "src_approved": outcome,
        "src_reviewed_by": admin_id if outcome is not None else None,
        "src_reviewed_at": datetime.now(UTC) if outcome is not None else None,
    }
    if notes is not None:
        fields["src_notes"] = notes

    student = await student_repository.update(db, student, **fields)
    logger.info(f"SRC decision for student {student.id}: {decision.value} by {admin_id}")

    return SRCDecisionResponse(
        student_id=student.id, src_approved=student.src_approved, src_notes=student.src_notes
    )
