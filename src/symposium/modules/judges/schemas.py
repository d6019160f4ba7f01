"""
Judge Schemas
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from symposium.modules.approvals import ApprovalStatus


class JudgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    institution: str | None = None
    department: str | None = None
    position: str | None = None
    employment_status: str | None = None
    highest_degree: str | None = None
    expertise_areas: list[str] | None = None
    publications: str | None = None
    patents: str | None = None
    previous_judging: bool = False
    judging_experience: str | None = None
    conflicts_of_interest: str | None = None
    references: list[dict] | None = None
    availability: str | None = None
    approval_status: ApprovalStatus
    created_at: datetime
