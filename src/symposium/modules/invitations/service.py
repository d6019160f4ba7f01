"""
Invitation Service Layer

Lets people without an account sign a student's or advisor's form through
an emailed link.

Sending an invitation:
1. Compose a token `{subject_id}_{purpose}_{epoch_millis}_{suffix}`
2. Email the link; a failed send aborts with nothing written
3. Store the token, address and sent flag on the owning record, replacing
   any earlier token so older links stop working

Redeeming a token (GET to view, POST to sign):
1. Parse the token; malformed tokens fail with 400 before any lookup
2. Load the subject (404) and compare the stored token (403)
3. Reject expired tokens when expiry is configured (403)
4. On POST, reject signers who already signed (409), then merge the
   submission and recompute the form's completion

Security considerations:
- Tokens are never logged
- Only the form fields needed to render the page are returned
"""

import logging
import secrets
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.email import Mailer
from symposium.core.errors import (
    ConflictError,
    EmailDeliveryError,
    NotFoundError,
    ServiceError,
    ValidationFailedError,
)
from symposium.modules.advisors import repository as advisor_repository
from symposium.modules.advisors.models import Advisor
from symposium.modules.invitations.forms import (
    ChaperoneRecord,
    PhotoReleaseForm,
    PhotoReleaseSigner,
    StatementForm,
    StatementSigner,
    confirm_chaperone,
    photo_release_completed,
    sign_photo_release,
    sign_statement_as_party,
)
from symposium.modules.invitations.schemas import (
    ChaperoneFormResponse,
    FormSubmittedResponse,
    InvitationSentResponse,
    PhotoReleaseFormResponse,
    PhotoReleaseFormSubmission,
    StatementFormResponse,
    StatementFormSubmission,
    StudentRef,
)
from symposium.modules.invitations.tokens import (
    PHOTO_RELEASE_PURPOSES,
    STATEMENT_PURPOSES,
    InvitationToken,
    TokenPurpose,
    compose_token,
    parse_token,
)
from symposium.modules.students import repository as student_repository
from symposium.modules.students.models import Student

logger = logging.getLogger(__name__)


class InvitationMismatchError(ServiceError):
    """Presented token is not the one currently stored on the record."""

    def __init__(self):
        super().__init__(
            message="Invalid or expired token",
            error_code="INVALID_INVITATION",
            status_code=403,
        )


class InvitationExpiredError(ServiceError):
    def __init__(self):
        super().__init__(
            message="This invitation has expired. Please ask for a new one.",
            error_code="INVITATION_EXPIRED",
            status_code=403,
        )


class AlreadySignedError(ConflictError):
    def __init__(self, message: str = "This form has already been signed."):
        super().__init__(message=message, error_code="ALREADY_SIGNED")


def _now() -> datetime:
    return datetime.now(UTC)


def _check_invitation(
    token: InvitationToken, stored_token: str | None, expiry_hours: int
) -> None:
    if not stored_token or not secrets.compare_digest(stored_token, token.raw):
        raise InvitationMismatchError()
    if token.is_expired(expiry_hours):
        raise InvitationExpiredError()


def _require_signature(signature: str) -> None:
    if not signature or not signature.strip():
        raise ValidationFailedError("Signature is required", "SIGNATURE_REQUIRED")


async def _load_student(db: AsyncSession, student_id: UUID) -> Student:
    student = await student_repository.get_by_id(db, student_id)
    if student is None:
        raise NotFoundError("Student", "STUDENT_NOT_FOUND")
    return student


async def _load_advisor(db: AsyncSession, advisor_id: UUID) -> Advisor:
    advisor = await advisor_repository.get_by_id(db, advisor_id)
    if advisor is None:
        raise NotFoundError("SRA", "ADVISOR_NOT_FOUND")
    return advisor


def _student_ref(student: Student) -> StudentRef:
    return StudentRef(id=student.id, first_name=student.first_name, last_name=student.last_name)


# ============================================
# Statement of outside assistance
# ============================================


async def send_statement_invitation(
    db: AsyncSession,
    mailer: Mailer,
    student_id: UUID,
    signer: StatementSigner,
    email: str,
) -> InvitationSentResponse:
    """
    Invite a teacher, mentor or parent to sign the student's statement.

    Raises:
        NotFoundError: Unknown student
        AlreadySignedError: That signer already signed
        EmailDeliveryError: Email failed; nothing was stored
    """
    student = await _load_student(db, student_id)
    form = StatementForm.load(student.statement_of_outside_assistance)
    party = form.party(signer)
    if party.completed:
        raise AlreadySignedError(f"The {signer.value} has already signed this form.")

    token = compose_token(student.id, TokenPurpose(signer.value))
    sent = await mailer.send_statement_invitation(email, student.full_name, signer.value, token)
    if not sent:
        raise EmailDeliveryError()

    sent_at = _now()
    party.email = email
    party.invite_token = token
    party.invite_sent = True
    party.invite_sent_at = sent_at
    await student_repository.update(db, student, statement_of_outside_assistance=form.dump())

    logger.info(f"Statement invitation ({signer.value}) sent for student {student.id}")
    return InvitationSentResponse(email=email, invite_sent_at=sent_at)


async def get_statement_form(
    db: AsyncSession, raw_token: str | None, *, expiry_hours: int = 0
) -> StatementFormResponse:
    token = parse_token(raw_token, STATEMENT_PURPOSES)
    signer = StatementSigner(token.purpose.value)

    student = await _load_student(db, token.subject_id)
    form = StatementForm.load(student.statement_of_outside_assistance)
    party = form.party(signer)
    _check_invitation(token, party.invite_token, expiry_hours)

    return StatementFormResponse(
        student=_student_ref(student),
        signer_type=signer,
        school=form.school,
        research_report_title=form.research_report_title,
        partner_first_name=form.partner_first_name,
        partner_last_name=form.partner_last_name,
        research_location=form.research_location,
        assistance_description=form.assistance_description,
        student_completed=form.student_completed,
        signer_completed=party.completed,
        signer_signature_date=party.signature_date,
        form_completed=form.form_completed,
    )


async def submit_statement_form(
    db: AsyncSession, data: StatementFormSubmission, *, expiry_hours: int = 0
) -> FormSubmittedResponse:
    """
    Record a third party's section and signature.

    Raises:
        InvalidTokenFormatError: Malformed token or signer type mismatch (400)
        NotFoundError: Unknown student (404)
        InvitationMismatchError / InvitationExpiredError: (403)
        AlreadySignedError: Signer already signed (409)
    """
    token = parse_token(data.token, STATEMENT_PURPOSES)
    if token.purpose.value != data.signer_type.value:
        raise ValidationFailedError("Invalid token or signer type mismatch", "SIGNER_TYPE_MISMATCH")
    _require_signature(data.signature)
    signer = data.signer_type

    student = await _load_student(db, token.subject_id)
    form = StatementForm.load(student.statement_of_outside_assistance)
    _check_invitation(token, form.party(signer).invite_token, expiry_hours)

    if form.party(signer).completed:
        raise AlreadySignedError()

    form = sign_statement_as_party(
        form,
        signer,
        signature=data.signature,
        now=_now(),
        first_name=data.first_name,
        last_name=data.last_name,
        institution=data.institution,
        comments=data.comments,
        safety_statement=data.safety_statement,
    )
    await student_repository.update(db, student, statement_of_outside_assistance=form.dump())

    logger.info(
        f"Statement signed by {signer.value} for student {student.id} "
        f"(form completed: {form.form_completed})"
    )
    return FormSubmittedResponse(completed=form.form_completed)


# ============================================
# Photo release
# ============================================


def _photo_signer(purpose: TokenPurpose) -> PhotoReleaseSigner:
    if purpose == TokenPurpose.TEAM_MEMBER:
        return PhotoReleaseSigner.TEAM_MEMBER_PARENT
    return PhotoReleaseSigner.PARENT


async def send_photo_release_invitation(
    db: AsyncSession,
    mailer: Mailer,
    student_id: UUID,
    email: str,
    *,
    team_member: bool = False,
) -> InvitationSentResponse:
    """
    Invite the student's parent, or the team member's parent, to sign the
    photo release.

    Raises:
        ValidationFailedError: Team member invitation for a solo project
        AlreadySignedError: That parent already signed
        EmailDeliveryError: Email failed; nothing was stored
    """
    student = await _load_student(db, student_id)
    if team_member and not student.is_team_project:
        raise ValidationFailedError("This is not a team project.", "NOT_TEAM_PROJECT")

    purpose = TokenPurpose.TEAM_MEMBER if team_member else TokenPurpose.PHOTO_RELEASE
    signer = _photo_signer(purpose)
    form = PhotoReleaseForm.load(student.photo_release)
    party = form.party(signer)
    if party.signature:
        raise AlreadySignedError("The photo release has already been signed by this parent.")

    token = compose_token(student.id, purpose)
    sent = await mailer.send_photo_release_invitation(email, student.full_name, token)
    if not sent:
        raise EmailDeliveryError()

    sent_at = _now()
    party.email = email
    party.invite_token = token
    party.invite_sent = True
    party.invite_sent_at = sent_at
    form.completed = photo_release_completed(form)
    await student_repository.update(db, student, photo_release=form.dump())

    logger.info(f"Photo release invitation ({signer.value}) sent for student {student.id}")
    return InvitationSentResponse(email=email, invite_sent_at=sent_at)


async def get_photo_release_form(
    db: AsyncSession, raw_token: str | None, *, expiry_hours: int = 0
) -> PhotoReleaseFormResponse:
    token = parse_token(raw_token, PHOTO_RELEASE_PURPOSES)
    signer = _photo_signer(token.purpose)

    student = await _load_student(db, token.subject_id)
    form = PhotoReleaseForm.load(student.photo_release)
    party = form.party(signer)
    _check_invitation(token, party.invite_token, expiry_hours)

    return PhotoReleaseFormResponse(
        student=_student_ref(student),
        team_member=signer == PhotoReleaseSigner.TEAM_MEMBER_PARENT,
        signed=bool(party.signature),
        signature_date=party.signature_date,
        completed=form.completed,
    )


async def submit_photo_release_form(
    db: AsyncSession, data: PhotoReleaseFormSubmission, *, expiry_hours: int = 0
) -> FormSubmittedResponse:
    token = parse_token(data.token, PHOTO_RELEASE_PURPOSES)
    _require_signature(data.signature)
    signer = _photo_signer(token.purpose)

    student = await _load_student(db, token.subject_id)
    form = PhotoReleaseForm.load(student.photo_release)
    _check_invitation(token, form.party(signer).invite_token, expiry_hours)

    if form.party(signer).signature:
        raise AlreadySignedError()

    form = sign_photo_release(
        form, signer, signature=data.signature, now=_now(), name=data.name, phone=data.phone
    )
    await student_repository.update(db, student, photo_release=form.dump())

    logger.info(
        f"Photo release signed by {signer.value} for student {student.id} "
        f"(completed: {form.completed})"
    )
    return FormSubmittedResponse(completed=form.completed)


# ============================================
# Chaperone
# ============================================


async def send_chaperone_invitation(
    db: AsyncSession,
    mailer: Mailer,
    advisor_id: UUID,
    chaperone_name: str,
    chaperone_email: str,
    school_name: str | None = None,
) -> InvitationSentResponse:
    """
    Ask the advisor's nominated chaperone to confirm.

    Inviting a different address replaces the chaperone record.

    Raises:
        AlreadySignedError: This chaperone already confirmed
        EmailDeliveryError: Email failed; nothing was stored
    """
    advisor = await _load_advisor(db, advisor_id)
    record = ChaperoneRecord.load(advisor.chaperone)
    chaperone_email = chaperone_email.strip().lower()

    if (record.email or "").lower() != chaperone_email:
        record = ChaperoneRecord()
    elif record.confirmed:
        raise AlreadySignedError("Chaperone already confirmed")

    token = compose_token(advisor.id, TokenPurpose.CHAPERONE)
    sent = await mailer.send_chaperone_invitation(
        chaperone_email, chaperone_name, school_name or advisor.school_name, token
    )
    if not sent:
        raise EmailDeliveryError()

    sent_at = _now()
    record.name = chaperone_name.strip()
    record.email = chaperone_email
    record.invite_token = token
    record.invite_sent = True
    record.invite_sent_at = sent_at
    await advisor_repository.save_chaperone(db, advisor, record.dump())

    logger.info(f"Chaperone invitation sent for advisor {advisor.id}")
    return InvitationSentResponse(email=chaperone_email, invite_sent_at=sent_at)


async def get_chaperone_form(
    db: AsyncSession, raw_token: str | None, *, expiry_hours: int = 0
) -> ChaperoneFormResponse:
    token = parse_token(raw_token, frozenset({TokenPurpose.CHAPERONE}))

    advisor = await _load_advisor(db, token.subject_id)
    record = ChaperoneRecord.load(advisor.chaperone)
    _check_invitation(token, record.invite_token, expiry_hours)

    return ChaperoneFormResponse(
        advisor_id=advisor.id,
        school_name=advisor.school_name,
        chaperone_name=record.name,
        chaperone_email=record.email,
        confirmed=record.confirmed,
    )


async def submit_chaperone_form(
    db: AsyncSession, raw_token: str, signature: str, *, expiry_hours: int = 0
) -> FormSubmittedResponse:
    token = parse_token(raw_token, frozenset({TokenPurpose.CHAPERONE}))
    _require_signature(signature)

    advisor = await _load_advisor(db, token.subject_id)
    record = ChaperoneRecord.load(advisor.chaperone)
    _check_invitation(token, record.invite_token, expiry_hours)

    if record.confirmed:
        raise AlreadySignedError("Chaperone already confirmed")

    record = confirm_chaperone(record, signature, _now())
    await advisor_repository.save_chaperone(db, advisor, record.dump())

    logger.info(f"Chaperone confirmed for advisor {advisor.id}")
    return FormSubmittedResponse(completed=True)
