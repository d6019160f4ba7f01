"""
Advisor Service Layer

Operations an approved advisor performs on their own school's records:
reviewing student registrations and nominating the school's chaperone.

Approvals write the new status first and then attempt exactly one
notification email. A failed email is logged and reported to the caller;
the status change stands.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.email import Mailer
from symposium.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from symposium.modules.advisors import repository
from symposium.modules.advisors.models import Advisor
from symposium.modules.advisors.schemas import (
    AdvisorResponse,
    ChaperoneUpdate,
    StudentDecisionResponse,
)
from symposium.modules.approvals import ApprovalStatus, can_decide
from symposium.modules.invitations.forms import ChaperoneRecord
from symposium.modules.students import repository as student_repository
from symposium.modules.students.schemas import StudentSummary
from symposium.modules.students.service import get_student

logger = logging.getLogger(__name__)


class AdvisorNotApprovedError(ForbiddenError):
    def __init__(self):
        super().__init__("Your advisor registration is still awaiting admin approval.")
        self.error_code = "ADVISOR_NOT_APPROVED"


async def get_advisor(db: AsyncSession, advisor_id: UUID) -> Advisor:
    advisor = await repository.get_by_id(db, advisor_id)
    if advisor is None:
        raise NotFoundError("Advisor", "ADVISOR_NOT_FOUND")
    return advisor


async def get_me(db: AsyncSession, advisor_id: UUID) -> AdvisorResponse:
    return AdvisorResponse.from_advisor(await get_advisor(db, advisor_id))


async def list_students(db: AsyncSession, advisor_id: UUID) -> list[StudentSummary]:
    await get_advisor(db, advisor_id)
    students = await student_repository.list_by_advisor(db, advisor_id)
    return [StudentSummary.from_student(s) for s in students]


async def decide_student(
    db: AsyncSession,
    mailer: Mailer,
    advisor_id: UUID,
    student_id: UUID,
    decision: ApprovalStatus,
) -> StudentDecisionResponse:
    """
    Approve or reject one of the advisor's students.

    Each approval call sends one notice to the student, even when the
    student was already approved.

    Raises:
        NotFoundError: Unknown advisor or student
        AdvisorNotApprovedError: Advisor not yet approved by an admin
        ForbiddenError: Student belongs to another advisor
        ValidationFailedError: Decision is not approve or reject
    """
    advisor = await get_advisor(db, advisor_id)
    if not advisor.admin_approved:
        raise AdvisorNotApprovedError()

    student = await get_student(db, student_id)
    if student.advisor_id != advisor.id:
        logger.warning(f"Advisor {advisor.id} tried to decide student {student.id} of another advisor")
        raise ForbiddenError("This student is not registered under you.")

    if not can_decide(student.status, decision):
        raise ValidationFailedError(f"Cannot set status to {decision.value}", "INVALID_DECISION")

    student = await student_repository.set_status(db, student, decision)

    notification_sent = False
    if decision == ApprovalStatus.APPROVED:
        notification_sent = await mailer.send_student_approved(
            student.email, student.full_name, advisor.full_name
        )
        if not notification_sent:
            logger.error(f"Approval email to student {student.id} failed; status kept")

    logger.info(f"Advisor {advisor.id} set student {student.id} to {decision.value}")
    return StudentDecisionResponse(
        student_id=student.id,
        status=student.status,
        notification_sent=notification_sent,
    )


async def update_chaperone(
    db: AsyncSession, advisor_id: UUID, data: ChaperoneUpdate
) -> AdvisorResponse:
    """
    Set the school's chaperone.

    Nominating a different person (new email) drops any pending invitation
    and confirmation; editing name or phone keeps them.
    """
    advisor = await get_advisor(db, advisor_id)
    record = ChaperoneRecord.load(advisor.chaperone)
    new_email = str(data.email).strip().lower()

    if (record.email or "").lower() != new_email:
        record = ChaperoneRecord()

    record.name = data.name.strip()
    record.email = new_email
    record.phone = data.phone

    advisor = await repository.save_chaperone(db, advisor, record.dump())
    logger.info(f"Chaperone updated for advisor {advisor.id}")
    return AdvisorResponse.from_advisor(advisor)
