"""
Schools Router

Public lookups used by the registration forms.

Endpoints:
- GET /schools - Registered schools, optionally filtered by name prefix
- GET /schools/reference - Bundled list of regional schools
- GET /schools/{school_id}/advisors - Advisors a student can register under
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.database import get_db
from symposium.modules.advisors import repository as advisor_repository
from symposium.modules.schools.reference import search_reference_schools
from symposium.modules.schools.repository import SchoolRepository
from symposium.modules.schools.schemas import (
    ReferenceSchoolListResponse,
    ReferenceSchoolResponse,
    SchoolAdvisorListResponse,
    SchoolAdvisorResponse,
    SchoolListResponse,
    SchoolResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=SchoolListResponse, summary="List Schools")
async def list_schools(
    q: str | None = Query(None, max_length=200, description="Name prefix"),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
) -> SchoolListResponse:
    schools = await SchoolRepository.search(db, q, limit)
    return SchoolListResponse(schools=[SchoolResponse.model_validate(s) for s in schools])


@router.get(
    "/reference",
    response_model=ReferenceSchoolListResponse,
    summary="Search Reference School List",
)
async def list_reference_schools(
    q: str | None = Query(None, max_length=200, description="Name or city substring"),
    limit: int = Query(20, ge=1, le=100),
) -> ReferenceSchoolListResponse:
    """Search the bundled list of regional public and non-public schools."""
    schools = search_reference_schools(q, limit)
    return ReferenceSchoolListResponse(
        schools=[ReferenceSchoolResponse.model_validate(s) for s in schools]
    )


@router.get(
    "/{school_id}/advisors",
    response_model=SchoolAdvisorListResponse,
    summary="List School Advisors",
    responses={404: {"description": "School not found"}},
)
async def list_school_advisors(
    school_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> SchoolAdvisorListResponse:
    school = await SchoolRepository.get_by_id(db, school_id)
    if school is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "SCHOOL_NOT_FOUND", "message": "School not found"},
        )

    advisors = await advisor_repository.list_by_school(db, school_id)
    return SchoolAdvisorListResponse(
        school_id=school_id,
        advisors=[SchoolAdvisorResponse.model_validate(a) for a in advisors],
    )
