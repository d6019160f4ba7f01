"""
Judge Models

Volunteer judges and the credentials they submit for review.
"""

import uuid

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from symposium.modules.approvals import ApprovalStatus
from symposium.modules.shared import BaseModel


class Judge(BaseModel):
    """Judge profile. Shares its ID with the judge's user account."""

    __tablename__ = "judges"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Credentials
    institution: Mapped[str | None] = mapped_column(String(200), nullable=True)
    department: Mapped[str | None] = mapped_column(String(200), nullable=True)
    position: Mapped[str | None] = mapped_column(String(200), nullable=True)
    employment_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    highest_degree: Mapped[str | None] = mapped_column(String(100), nullable=True)
    expertise_areas: Mapped[list | None] = mapped_column(JSON, nullable=True)
    publications: Mapped[str | None] = mapped_column(Text, nullable=True)
    patents: Mapped[str | None] = mapped_column(Text, nullable=True)
    previous_judging: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    judging_experience: Mapped[str | None] = mapped_column(Text, nullable=True)
    conflicts_of_interest: Mapped[str | None] = mapped_column(Text, nullable=True)
    references: Mapped[list | None] = mapped_column(JSON, nullable=True)
    availability: Mapped[str | None] = mapped_column(Text, nullable=True)

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

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Judge(id={self.id}, status={self.approval_status.value})>"
