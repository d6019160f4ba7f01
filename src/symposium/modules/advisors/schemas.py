"""
Advisor Schemas
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from symposium.modules.advisors.models import Advisor
from symposium.modules.approvals import ApprovalStatus
from symposium.modules.invitations.forms import ChaperoneRecord


class ChaperoneView(BaseModel):
    """Chaperone status as shown to the advisor and admins (no token)."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    invite_sent: bool = False
    invite_sent_at: datetime | None = None
    confirmed: bool = False
    signature: str | None = None
    confirmation_date: datetime | None = None

    @classmethod
    def from_record(cls, record: ChaperoneRecord) -> "ChaperoneView":
        return cls(**record.model_dump(exclude={"invite_token"}))


class AdvisorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    title: str | None = None
    school_id: UUID
    school_name: str
    approval_status: ApprovalStatus
    chaperone: ChaperoneView | None = None
    created_at: datetime

    @classmethod
    def from_advisor(cls, advisor: Advisor) -> "AdvisorResponse":
        chaperone = (
            ChaperoneView.from_record(ChaperoneRecord.load(advisor.chaperone))
            if advisor.chaperone
            else None
        )
        return cls.model_validate(advisor).model_copy(update={"chaperone": chaperone})


class ChaperoneUpdate(BaseModel):
    """PUT /advisors/me/chaperone."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str | None = Field(None, max_length=30)


class StudentDecisionResponse(BaseModel):
    """Result of an approve or reject action."""

    student_id: UUID
    status: ApprovalStatus
    notification_sent: bool
