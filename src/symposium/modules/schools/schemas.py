"""
School Schemas
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class SchoolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    address: str | None = None


class SchoolListResponse(BaseModel):
    schools: list[SchoolResponse]


class ReferenceSchoolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    city: str
    state: str
    zip: str
    district: str
    address: str
    type: str


class ReferenceSchoolListResponse(BaseModel):
    schools: list[ReferenceSchoolResponse]


class SchoolAdvisorResponse(BaseModel):
    """Advisor choice shown on the student registration form."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    title: str | None = None


class SchoolAdvisorListResponse(BaseModel):
    school_id: UUID
    advisors: list[SchoolAdvisorResponse]
