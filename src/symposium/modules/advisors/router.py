"""
Advisor Router

The signed-in advisor's dashboard.

Endpoints:
- GET /advisors/me - Advisor profile and chaperone status
- GET /advisors/me/students - Students registered under the advisor
- POST /advisors/me/students/{student_id}/approve
- POST /advisors/me/students/{student_id}/reject
- PUT /advisors/me/chaperone - Nominate the school's chaperone
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.auth import CurrentUser, require_advisor
from symposium.core.context import AppContext, get_context
from symposium.core.database import get_db
from symposium.core.errors import ServiceError, internal_error, to_http_exception
from symposium.modules.advisors import service
from symposium.modules.advisors.schemas import (
    AdvisorResponse,
    ChaperoneUpdate,
    StudentDecisionResponse,
)
from symposium.modules.approvals import ApprovalStatus
from symposium.modules.students.schemas import StudentSummary

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=AdvisorResponse, summary="Advisor Profile")
async def get_me(
    user: CurrentUser = Depends(require_advisor),
    db: AsyncSession = Depends(get_db),
) -> AdvisorResponse:
    try:
        return await service.get_me(db, user.id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error loading profile for {user.id}: {e}")
        raise internal_error() from e


@router.get("/me/students", response_model=list[StudentSummary], summary="My Students")
async def list_students(
    user: CurrentUser = Depends(require_advisor),
    db: AsyncSession = Depends(get_db),
) -> list[StudentSummary]:
    try:
        return await service.list_students(db, user.id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error listing students for {user.id}: {e}")
        raise internal_error() from e


async def _decide(
    db: AsyncSession,
    context: AppContext,
    user: CurrentUser,
    student_id: UUID,
    decision: ApprovalStatus,
) -> StudentDecisionResponse:
    try:
        return await service.decide_student(db, context.mailer, user.id, student_id, decision)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error deciding student {student_id}: {e}")
        raise internal_error() from e


@router.post(
    "/me/students/{student_id}/approve",
    response_model=StudentDecisionResponse,
    summary="Approve Student",
    responses={403: {"description": "Not your student, or advisor not approved"}},
)
async def approve_student(
    student_id: UUID,
    user: CurrentUser = Depends(require_advisor),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> StudentDecisionResponse:
    """Approve a student's registration and email them the news."""
    return await _decide(db, context, user, student_id, ApprovalStatus.APPROVED)


@router.post(
    "/me/students/{student_id}/reject",
    response_model=StudentDecisionResponse,
    summary="Reject Student",
)
async def reject_student(
    student_id: UUID,
    user: CurrentUser = Depends(require_advisor),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> StudentDecisionResponse:
    return await _decide(db, context, user, student_id, ApprovalStatus.REJECTED)


@router.put("/me/chaperone", response_model=AdvisorResponse, summary="Set Chaperone")
async def update_chaperone(
    data: ChaperoneUpdate,
    user: CurrentUser = Depends(require_advisor),
    db: AsyncSession = Depends(get_db),
) -> AdvisorResponse:
    try:
        return await service.update_chaperone(db, user.id, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error updating chaperone for {user.id}: {e}")
        raise internal_error() from e
