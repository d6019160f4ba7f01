"""
Student Models

Student registrations, their research materials and the embedded multi-party
forms (statement of outside assistance, photo release, ethics questionnaire).
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from symposium.modules.approvals import ApprovalStatus
from symposium.modules.shared import BaseModel


class PaymentStatus(str, enum.Enum):
    NOT_RECEIVED = "not_received"
    RECEIVED = "received"


def _values(enum_cls):
    return [member.value for member in enum_cls]


class Student(BaseModel):
    """
    Student profile. Shares its ID with the student's user account.

    The JSON columns hold embedded sub-forms that are replaced whole on every
    write; see `symposium.modules.invitations.forms` for their shape.
    """

    __tablename__ = "students"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    grade: Mapped[str] = mapped_column(String(10), nullable=False)

    school_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("schools.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    school_name: Mapped[str] = mapped_column(String(200), nullable=False)
    advisor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("advisors.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # Project
    project_title: Mapped[str | None] = mapped_column(String(300), nullable=True)
    project_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_team_project: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    team_member_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    team_member_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Approval
    status: Mapped[ApprovalStatus] = mapped_column(
        ENUM(
            ApprovalStatus,
            name="approval_status",
            create_type=False,
            values_callable=_values,
        ),
        nullable=False,
        default=ApprovalStatus.PENDING,
        index=True,
    )
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    payment_status: Mapped[PaymentStatus] = mapped_column(
        ENUM(PaymentStatus, name="payment_status", create_type=False, values_callable=_values),
        nullable=False,
        default=PaymentStatus.NOT_RECEIVED,
    )

    # Materials (public URLs)
    research_plan_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    abstract_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    slideshow_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    presentation_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    research_report_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Embedded forms
    statement_of_outside_assistance: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    photo_release: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    ethics_questionnaire: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    # Special review committee, independent of `status`
    src_approval_requested: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    src_approval_requested_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    src_approved: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    src_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    src_reviewed_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    src_reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, status={self.status.value})>"
