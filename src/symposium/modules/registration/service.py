"""
Registration Service Layer

Creates the user account and the matching role profile in one transaction,
then sends the verification code and the review notices.

Notices are best-effort: the registration is already committed when they are
sent, so a failed email is logged and reported, never rolled back.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.config import Settings
from symposium.core.email import Mailer
from symposium.core.errors import NotFoundError, ValidationFailedError
from symposium.core.roles import UserRole, dashboard_path
from symposium.modules.advisors import repository as advisor_repository
from symposium.modules.judges import repository as judge_repository
from symposium.modules.notifications import notify_admins_of_registration
from symposium.modules.registration.schemas import (
    AdvisorRegistration,
    JudgeRegistration,
    RegistrationResponse,
    StudentRegistration,
)
from symposium.modules.schools.models import School
from symposium.modules.schools.repository import SchoolRepository
from symposium.modules.students import repository as student_repository
from symposium.modules.users import service as user_service
from symposium.modules.users.models import User

logger = logging.getLogger(__name__)


async def _resolve_school(db: AsyncSession, data: AdvisorRegistration) -> School:
    """Use the selected school, else the one with the same name, else create it."""
    if data.school_id is not None:
        school = await SchoolRepository.get_by_id(db, data.school_id)
        if school is None:
            raise NotFoundError("School", "SCHOOL_NOT_FOUND")
        return school

    school = await SchoolRepository.get_by_name(db, data.school_name)
    if school is not None:
        return school

    return await SchoolRepository.create(db, name=data.school_name, address=data.school_address)


async def _send_code(mailer: Mailer, user: User, name: str, code: str) -> bool:
    sent = await mailer.send_verification_code(user.email, name, code)
    if not sent:
        logger.error(f"Verification email failed for new user {user.id}")
    return sent


def _response(user: User, verification_sent: bool) -> RegistrationResponse:
    message = (
        "Registration received. Check your email for a verification code."
        if verification_sent
        else "Registration received, but the verification email could not be sent. "
        "Request a new code from the verification page."
    )
    return RegistrationResponse(
        user_id=user.id,
        role=user.role,
        email=user.email,
        verification_sent=verification_sent,
        dashboard_path=dashboard_path(user.role),
        message=message,
    )


async def register_advisor(
    db: AsyncSession, mailer: Mailer, settings: Settings, data: AdvisorRegistration
) -> RegistrationResponse:
    """
    Register a Science Research Advisor pending admin approval.

    Raises:
        DuplicateEmailError: Email already registered
        NotFoundError: Selected school does not exist
    """
    user, code = await user_service.create_account(
        db,
        email=data.email,
        password=data.password,
        role=UserRole.ADVISOR,
        code_expiry_hours=settings.verification_code_expiry_hours,
    )
    school = await _resolve_school(db, data)
    advisor = await advisor_repository.create(
        db,
        user_id=user.id,
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email=user.email,
        phone=data.phone,
        title=data.title,
        school_id=school.id,
        school_name=school.name,
    )
    await db.commit()
    logger.info(f"Advisor registered: {advisor.id} at {school.name}")

    verification_sent = await _send_code(mailer, user, advisor.full_name, code)

    detail_parts = [f"School: {school.name}"]
    if data.title:
        detail_parts.append(f"Title: {data.title}")
    if data.phone:
        detail_parts.append(f"Phone: {data.phone}")
    await notify_admins_of_registration(
        db,
        mailer,
        settings.admin_emails_list,
        kind="advisor",
        name=advisor.full_name,
        email=advisor.email,
        detail="; ".join(detail_parts),
    )

    return _response(user, verification_sent)


async def register_student(
    db: AsyncSession, mailer: Mailer, settings: Settings, data: StudentRegistration
) -> RegistrationResponse:
    """
    Register a student under an advisor of the selected school.

    Raises:
        DuplicateEmailError: Email already registered
        NotFoundError: School or advisor does not exist
        ValidationFailedError: Advisor does not belong to the school
    """
    school = await SchoolRepository.get_by_id(db, data.school_id)
    if school is None:
        raise NotFoundError("School", "SCHOOL_NOT_FOUND")

    advisor = await advisor_repository.get_by_id(db, data.advisor_id)
    if advisor is None:
        raise NotFoundError("Advisor", "ADVISOR_NOT_FOUND")
    if advisor.school_id != school.id:
        raise ValidationFailedError(
            "The selected advisor is not registered at this school.", "ADVISOR_SCHOOL_MISMATCH"
        )

    user, code = await user_service.create_account(
        db,
        email=data.email,
        password=data.password,
        role=UserRole.STUDENT,
        code_expiry_hours=settings.verification_code_expiry_hours,
    )
    student = await student_repository.create(
        db,
        user_id=user.id,
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email=user.email,
        grade=data.grade,
        school_id=school.id,
        school_name=school.name,
        advisor_id=advisor.id,
        project_title=data.project_title,
        project_description=data.project_description,
        is_team_project=data.is_team_project,
        team_member_name=data.team_member_name if data.is_team_project else None,
        team_member_email=str(data.team_member_email)
        if data.is_team_project and data.team_member_email
        else None,
    )
    await db.commit()
    logger.info(f"Student registered: {student.id} under advisor {advisor.id}")

    verification_sent = await _send_code(mailer, user, student.full_name, code)

    notified = await mailer.send_new_student_notice(
        advisor.email,
        advisor_name=advisor.full_name,
        student_id=str(student.id),
        student_name=student.full_name,
        student_email=student.email,
        school_name=school.name,
        grade=student.grade,
        project_title=student.project_title,
    )
    if not notified:
        logger.error(f"Failed to notify advisor {advisor.id} of new student {student.id}")

    return _response(user, verification_sent)


async def register_judge(
    db: AsyncSession, mailer: Mailer, settings: Settings, data: JudgeRegistration
) -> RegistrationResponse:
    """
    Register a volunteer judge pending admin approval.

    Raises:
        DuplicateEmailError: Email already registered
    """
    user, code = await user_service.create_account(
        db,
        email=data.email,
        password=data.password,
        role=UserRole.JUDGE,
        code_expiry_hours=settings.verification_code_expiry_hours,
    )
    profile = data.model_dump(exclude={"email", "password", "first_name", "last_name"})
    judge = await judge_repository.create(
        db,
        user_id=user.id,
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email=user.email,
        **profile,
    )
    await db.commit()
    logger.info(f"Judge registered: {judge.id}")

    verification_sent = await _send_code(mailer, user, judge.full_name, code)

    await notify_admins_of_registration(
        db,
        mailer,
        settings.admin_emails_list,
        kind="judge",
        name=judge.full_name,
        email=judge.email,
        detail=judge.institution,
    )

    return _response(user, verification_sent)
