"""
Advisor Models

Science Research Advisors (SRAs): teachers who register a school's students
and nominate the school's chaperone.
"""

import uuid

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import ENUM, JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from symposium.modules.approvals import ApprovalStatus
from symposium.modules.shared import BaseModel


class Advisor(BaseModel):
    """
    Advisor profile. Shares its ID with the advisor's user account.

    `chaperone` is an embedded record:
    {name, email, phone, inviteToken, inviteSent, confirmed, signature, confirmationDate}
    """

    __tablename__ = "advisors"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    title: Mapped[str | None] = mapped_column(String(100), nullable=True)

    school_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("schools.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    school_name: Mapped[str] = mapped_column(String(200), nullable=False)

    approval_status: Mapped[ApprovalStatus] = mapped_column(
        ENUM(
            ApprovalStatus,
            name="approval_status",
            create_type=False,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=ApprovalStatus.PENDING,
    )

    chaperone: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def admin_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED

    def __repr__(self) -> str:
        return f"<Advisor(id={self.id}, school={self.school_name})>"
