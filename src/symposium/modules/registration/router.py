"""
Registration Router

Public sign-up endpoints for advisors, students and judges.

Endpoints:
- POST /register/advisor
- POST /register/student
- POST /register/judge
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.context import AppContext, get_context
from symposium.core.database import get_db
from symposium.core.errors import ServiceError, internal_error, to_http_exception
from symposium.modules.registration import service
from symposium.modules.registration.schemas import (
    AdvisorRegistration,
    JudgeRegistration,
    RegistrationResponse,
    StudentRegistration,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_RESPONSES = {
    400: {"description": "Validation error"},
    404: {"description": "Referenced school or advisor not found"},
    409: {"description": "Email already registered"},
}


@router.post(
    "/advisor",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Science Research Advisor",
    responses=_RESPONSES,
)
async def register_advisor(
    data: AdvisorRegistration,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> RegistrationResponse:
    """
    Register an advisor. The school is picked by ID or created by name.

    The advisor must verify their email and be approved by an
    administrator before managing students.
    """
    try:
        return await service.register_advisor(db, context.mailer, context.settings, data)
    except ServiceError as e:
        logger.warning(f"Advisor registration rejected: {e.error_code}")
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error registering advisor: {e}")
        raise internal_error() from e


@router.post(
    "/student",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Student",
    responses=_RESPONSES,
)
async def register_student(
    data: StudentRegistration,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> RegistrationResponse:
    """Register a student. Their advisor is asked to approve the registration."""
    try:
        return await service.register_student(db, context.mailer, context.settings, data)
    except ServiceError as e:
        logger.warning(f"Student registration rejected: {e.error_code}")
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error registering student: {e}")
        raise internal_error() from e


@router.post(
    "/judge",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Judge",
    responses=_RESPONSES,
)
async def register_judge(
    data: JudgeRegistration,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> RegistrationResponse:
    try:
        return await service.register_judge(db, context.mailer, context.settings, data)
    except ServiceError as e:
        logger.warning(f"Judge registration rejected: {e.error_code}")
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error registering judge: {e}")
        raise internal_error() from e
