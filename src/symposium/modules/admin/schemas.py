"""
Admin Schemas
"""

from uuid import UUID

from pydantic import BaseModel, Field

from symposium.modules.approvals import ApprovalStatus, SRCDecision
from symposium.modules.students.models import PaymentStatus


class DecisionResponse(BaseModel):
    """Result of an admin approve or reject action."""

    id: UUID
    status: ApprovalStatus
    notification_sent: bool


class PaymentUpdate(BaseModel):
    payment_status: PaymentStatus


class PaymentResponse(BaseModel):
    student_id: UUID
    payment_status: PaymentStatus


class SRCDecisionRequest(BaseModel):
    decision: SRCDecision
    notes: str | None = Field(None, max_length=5000)


class SRCDecisionResponse(BaseModel):
    student_id: UUID
    src_approved: bool | None
    src_notes: str | None = None


class StatusCounts(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class StudentCounts(StatusCounts):
    payment_received: int = 0
    src_pending: int = 0


class DashboardStats(BaseModel):
    advisors: StatusCounts
    judges: StatusCounts
    students: StudentCounts
