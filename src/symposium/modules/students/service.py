"""
Student Service Layer

The student's own dashboard operations: project details, the student-owned
sections and signature of the statement of outside assistance, the ethics
questionnaire and the special review committee (SRC) request.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.errors import ConflictError, NotFoundError, ValidationFailedError
from symposium.modules.invitations.forms import StatementForm, sign_statement_as_student
from symposium.modules.students import repository
from symposium.modules.students.models import Student
from symposium.modules.students.schemas import (
    EthicsQuestionnaire,
    ProjectUpdate,
    SRCRequestResponse,
    StatementStudentSections,
    StudentDetail,
)

logger = logging.getLogger(__name__)


class StudentNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__("Student", "STUDENT_NOT_FOUND")


async def get_student(db: AsyncSession, student_id: UUID) -> Student:
    student = await repository.get_by_id(db, student_id)
    if student is None:
        raise StudentNotFoundError()
    return student


async def get_me(db: AsyncSession, student_id: UUID) -> StudentDetail:
    return StudentDetail.from_student(await get_student(db, student_id))


async def update_project(db: AsyncSession, student_id: UUID, data: ProjectUpdate) -> StudentDetail:
    """Overwrite the provided project fields. Leaving a team clears the partner."""
    student = await get_student(db, student_id)
    fields = data.model_dump(exclude_unset=True)

    if fields.get("is_team_project") is False:
        fields["team_member_name"] = None
        fields["team_member_email"] = None

    student = await repository.update(db, student, **fields)
    logger.info(f"Project details updated for student {student.id}")
    return StudentDetail.from_student(student)


async def save_statement_sections(
    db: AsyncSession, student_id: UUID, sections: StatementStudentSections
) -> StudentDetail:
    """Merge the student-owned statement sections. Signatures are untouched."""
    student = await get_student(db, student_id)
    form = StatementForm.load(student.statement_of_outside_assistance)

    for key, value in sections.model_dump(exclude_unset=True).items():
        setattr(form, key, value)

    student = await repository.update(db, student, statement_of_outside_assistance=form.dump())
    return StudentDetail.from_student(student)


async def sign_statement(db: AsyncSession, student_id: UUID, signature: str) -> StudentDetail:
    """
    Record the student's signature and recompute the form's completion.

    Raises:
        ValidationFailedError: Blank signature
        ConflictError: Student already signed
    """
    if not signature.strip():
        raise ValidationFailedError("Signature is required", "SIGNATURE_REQUIRED")

    student = await get_student(db, student_id)
    form = StatementForm.load(student.statement_of_outside_assistance)
    if form.student_completed:
        raise ConflictError("You have already signed this form.", "ALREADY_SIGNED")

    form = sign_statement_as_student(form, signature, datetime.now(UTC))
    student = await repository.update(db, student, statement_of_outside_assistance=form.dump())

    logger.info(
        f"Student {student.id} signed statement of outside assistance "
        f"(form completed: {form.form_completed})"
    )
    return StudentDetail.from_student(student)


async def update_ethics_questionnaire(
    db: AsyncSession, student_id: UUID, questionnaire: EthicsQuestionnaire
) -> StudentDetail:
    """
    Replace the ethics questionnaire.

    Raises:
        ConflictError: Answers are locked once SRC review was requested
    """
    student = await get_student(db, student_id)
    if student.src_approval_requested:
        raise ConflictError(
            "The questionnaire cannot be changed after SRC review was requested.",
            "ETHICS_LOCKED",
        )

    student = await repository.update(
        db, student, ethics_questionnaire=questionnaire.model_dump(mode="json")
    )
    return StudentDetail.from_student(student)


async def request_src_approval(db: AsyncSession, student_id: UUID) -> SRCRequestResponse:
    """
    Submit the project for special review committee approval.

    Raises:
        ValidationFailedError: No ethics questionnaire on file
        ConflictError: Already requested
    """
    student = await get_student(db, student_id)
    if not student.ethics_questionnaire:
        raise ValidationFailedError(
            "Complete the ethics questionnaire before requesting SRC review.",
            "ETHICS_REQUIRED",
        )
    if student.src_approval_requested:
        raise ConflictError("SRC review has already been requested.", "SRC_ALREADY_REQUESTED")

    student = await repository.update(
        db,
        student,
        src_approval_requested=True,
        src_approval_requested_at=datetime.now(UTC),
        src_approved=None,
    )
    logger.info(f"SRC review requested for student {student.id}")

    return SRCRequestResponse(
        student_id=student.id,
        src_approval_requested=student.src_approval_requested,
        src_approval_requested_at=student.src_approval_requested_at,
    )
