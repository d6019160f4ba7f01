"""
Embedded Sign-Off Forms

Shapes of the multi-party forms stored on student and advisor records, plus
the rules that derive their completion state.

Forms are stored as JSON and round-tripped through these models:
load with `StatementForm.load(student.statement_of_outside_assistance)`,
store with `form.dump()`. Every write replaces the whole document.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StatementSigner(str, Enum):
    """Third parties who can attest to a student's statement of outside assistance."""

    TEACHER = "teacher"
    MENTOR = "mentor"
    PARENT = "parent"


class PhotoReleaseSigner(str, Enum):
    PARENT = "parent"
    TEAM_MEMBER_PARENT = "team_member_parent"


class _StoredForm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @classmethod
    def load(cls, data: dict | None):
        return cls.model_validate(data or {})

    def dump(self) -> dict:
        return self.model_dump(mode="json")


# ============================================
# Statement of outside assistance
# ============================================


class StatementParty(BaseModel):
    """One invited signer's section of the statement."""

    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    invite_token: str | None = None
    invite_sent: bool = False
    invite_sent_at: datetime | None = None

    first_name: str | None = None
    last_name: str | None = None
    institution: str | None = None
    comments: str | None = None
    safety_statement: str | None = None

    signature: str | None = None
    signature_date: datetime | None = None
    completed: bool = False


class StatementForm(_StoredForm):
    """Statement of outside assistance."""

    # Student sections
    student_first_name: str | None = None
    student_last_name: str | None = None
    school: str | None = None
    research_report_title: str | None = None
    partner_first_name: str | None = None
    partner_last_name: str | None = None
    research_location: str | None = None
    assistance_description: str | None = None

    student_signature: str | None = None
    student_signature_date: datetime | None = None
    student_completed: bool = False

    teacher: StatementParty = Field(default_factory=StatementParty)
    mentor: StatementParty = Field(default_factory=StatementParty)
    parent: StatementParty = Field(default_factory=StatementParty)

    form_completed: bool = False

    def party(self, signer: StatementSigner) -> StatementParty:
        return getattr(self, signer.value)

    def has_any_signature(self) -> bool:
        if self.student_completed or self.student_signature:
            return True
        return any(
            self.party(signer).completed or self.party(signer).signature
            for signer in StatementSigner
        )


def statement_completed(form: StatementForm) -> bool:
    """Student signed and at least one teacher, mentor or parent signed."""
    return form.student_completed and any(
        form.party(signer).completed for signer in StatementSigner
    )


def sign_statement_as_student(form: StatementForm, signature: str, now: datetime) -> StatementForm:
    form.student_signature = signature.strip()
    form.student_signature_date = now
    form.student_completed = True
    form.form_completed = statement_completed(form)
    return form


def sign_statement_as_party(
    form: StatementForm,
    signer: StatementSigner,
    *,
    signature: str,
    now: datetime,
    first_name: str | None = None,
    last_name: str | None = None,
    institution: str | None = None,
    comments: str | None = None,
    safety_statement: str | None = None,
) -> StatementForm:
    """Merge a third party's section into the form and recompute completion."""
    party = form.party(signer)
    for field_name, value in (
        ("first_name", first_name),
        ("last_name", last_name),
        ("institution", institution),
        ("comments", comments),
        ("safety_statement", safety_statement),
    ):
        if value is not None:
            setattr(party, field_name, value)

    party.signature = signature.strip()
    party.signature_date = now
    party.completed = True
    form.form_completed = statement_completed(form)
    return form


def clear_statement_signatures(form: StatementForm) -> StatementForm:
    """
    Drop every signature and completion flag.

    Invitation emails and tokens are kept so the same parties can sign the
    replaced plan again.
    """
    form.student_signature = None
    form.student_signature_date = None
    form.student_completed = False
    for signer in StatementSigner:
        party = form.party(signer)
        party.signature = None
        party.signature_date = None
        party.completed = False
    form.form_completed = False
    return form


# ============================================
# Photo release
# ============================================


class PhotoReleaseParty(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    invite_token: str | None = None
    invite_sent: bool = False
    invite_sent_at: datetime | None = None

    name: str | None = None
    phone: str | None = None
    signature: str | None = None
    signature_date: datetime | None = None


class PhotoReleaseForm(_StoredForm):
    parent: PhotoReleaseParty = Field(default_factory=PhotoReleaseParty)
    team_member_parent: PhotoReleaseParty = Field(default_factory=PhotoReleaseParty)
    completed: bool = False

    def party(self, signer: PhotoReleaseSigner) -> PhotoReleaseParty:
        return getattr(self, signer.value)


def photo_release_completed(form: PhotoReleaseForm) -> bool:
    """Parent signed, and the team member's parent too when one was invited."""
    if not form.parent.signature:
        return False
    if form.team_member_parent.email:
        return bool(form.team_member_parent.signature)
    return True


def sign_photo_release(
    form: PhotoReleaseForm,
    signer: PhotoReleaseSigner,
    *,
    signature: str,
    now: datetime,
    name: str | None = None,
    phone: str | None = None,
) -> PhotoReleaseForm:
    party = form.party(signer)
    if name is not None:
        party.name = name
    if phone is not None:
        party.phone = phone
    party.signature = signature.strip()
    party.signature_date = now
    form.completed = photo_release_completed(form)
    return form


# ============================================
# Chaperone
# ============================================


class ChaperoneRecord(_StoredForm):
    """Chaperone nominated by an advisor for the school's students."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None

    invite_token: str | None = None
    invite_sent: bool = False
    invite_sent_at: datetime | None = None

    confirmed: bool = False
    signature: str | None = None
    confirmation_date: datetime | None = None


def confirm_chaperone(record: ChaperoneRecord, signature: str, now: datetime) -> ChaperoneRecord:
    record.confirmed = True
    record.confirmation_date = now
    record.signature = signature.strip()
    return record
