"""
Registration Schemas

Request bodies for advisor, student and judge sign-up.
"""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from symposium.core.roles import UserRole


class AccountFields(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class AdvisorRegistration(AccountFields):
    """Request body for POST /register/advisor."""

    phone: str | None = Field(None, max_length=30)
    title: str | None = Field(None, max_length=100)

    # Either an existing school or a new one by name
    school_id: UUID | None = None
    school_name: str | None = Field(None, min_length=1, max_length=200)
    school_address: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def validate_school(self) -> "AdvisorRegistration":
        if self.school_id is None and not (self.school_name and self.school_name.strip()):
            raise ValueError("Either school_id or school_name is required")
        return self


class StudentRegistration(AccountFields):
    """Request body for POST /register/student."""

    grade: str = Field(..., min_length=1, max_length=10)
    school_id: UUID
    advisor_id: UUID

    project_title: str | None = Field(None, max_length=300)
    project_description: str | None = Field(None, max_length=5000)
    is_team_project: bool = False
    team_member_name: str | None = Field(None, max_length=200)
    team_member_email: EmailStr | None = None

    @model_validator(mode="after")
    def validate_team(self) -> "StudentRegistration":
        if self.is_team_project and not self.team_member_name:
            raise ValueError("team_member_name is required for team projects")
        return self


class JudgeReference(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=30)


class JudgeRegistration(AccountFields):
    """Request body for POST /register/judge."""

    phone: str | None = Field(None, max_length=30)
    institution: str | None = Field(None, max_length=200)
    department: str | None = Field(None, max_length=200)
    position: str | None = Field(None, max_length=200)
    employment_status: str | None = Field(None, pattern=r"^(currently_working|retired)$")
    highest_degree: str | None = Field(None, max_length=100)
    expertise_areas: list[str] = Field(default_factory=list)
    publications: str | None = Field(None, max_length=5000)
    patents: str | None = Field(None, max_length=5000)
    previous_judging: bool = False
    judging_experience: str | None = Field(None, max_length=5000)
    conflicts_of_interest: str | None = Field(None, max_length=5000)
    references: list[JudgeReference] = Field(default_factory=list)
    availability: str | None = Field(None, max_length=500)


class RegistrationResponse(BaseModel):
    user_id: UUID
    role: UserRole
    email: str
    verification_sent: bool
    dashboard_path: str
    message: str
