"""
Invitation Schemas

Request and response bodies for sending invitations and for the public,
token-gated sign-off forms.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from symposium.modules.invitations.forms import StatementSigner


class SendStatementInvitationRequest(BaseModel):
    """POST /send-statement-invitation."""

    type: StatementSigner
    email: EmailStr


class SendPhotoReleaseInvitationRequest(BaseModel):
    """POST /send-photo-release-invitation."""

    email: EmailStr
    team_member: bool = False


class SendChaperoneInvitationRequest(BaseModel):
    """POST /send-chaperone-invitation."""

    chaperone_name: str = Field(..., min_length=1, max_length=200)
    chaperone_email: EmailStr
    school_name: str | None = Field(None, max_length=200)


class InvitationSentResponse(BaseModel):
    success: bool = True
    email: str
    invite_sent_at: datetime


class StudentRef(BaseModel):
    id: UUID
    first_name: str
    last_name: str


# ============================================
# Statement of outside assistance
# ============================================


class StatementFormResponse(BaseModel):
    """What an invited teacher, mentor or parent sees before signing."""

    student: StudentRef
    signer_type: StatementSigner
    school: str | None = None
    research_report_title: str | None = None
    partner_first_name: str | None = None
    partner_last_name: str | None = None
    research_location: str | None = None
    assistance_description: str | None = None
    student_completed: bool
    signer_completed: bool
    signer_signature_date: datetime | None = None
    form_completed: bool


class StatementFormSubmission(BaseModel):
    token: str = Field(..., min_length=1, max_length=500)
    signer_type: StatementSigner
    signature: str = Field(..., min_length=1, max_length=200)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    institution: str | None = Field(None, max_length=200)
    comments: str | None = Field(None, max_length=10000)
    safety_statement: str | None = Field(None, max_length=10000)


# ============================================
# Photo release
# ============================================


class PhotoReleaseFormResponse(BaseModel):
    student: StudentRef
    team_member: bool
    signed: bool
    signature_date: datetime | None = None
    completed: bool


class PhotoReleaseFormSubmission(BaseModel):
    token: str = Field(..., min_length=1, max_length=500)
    signature: str = Field(..., min_length=1, max_length=200)
    name: str | None = Field(None, max_length=200)
    phone: str | None = Field(None, max_length=30)


# ============================================
# Chaperone
# ============================================


class ChaperoneFormResponse(BaseModel):
    advisor_id: UUID
    school_name: str
    chaperone_name: str | None = None
    chaperone_email: str | None = None
    confirmed: bool


class ChaperoneFormSubmission(BaseModel):
    token: str = Field(..., min_length=1, max_length=500)
    signature: str = Field(..., min_length=1, max_length=200)


class FormSubmittedResponse(BaseModel):
    success: bool = True
    completed: bool
