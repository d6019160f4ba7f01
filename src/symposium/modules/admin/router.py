"""
Admin Router

Dashboard endpoints for fair directors and website managers.

Endpoints:
- GET /admin/advisors, /admin/students, /admin/judges - Listings
- GET /admin/stats - Dashboard counts
- POST /admin/advisors/{advisor_id}/approve|reject
- POST /admin/judges/{judge_id}/approve|reject
- PUT /admin/students/{student_id}/payment
- PUT /admin/students/{student_id}/src

All endpoints require the director or manager role.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.auth import CurrentUser, require_admin
from symposium.core.context import AppContext, get_context
from symposium.core.database import get_db
from symposium.core.errors import ServiceError, internal_error, to_http_exception
from symposium.modules.admin import service
from symposium.modules.admin.schemas import (
    DashboardStats,
    DecisionResponse,
    PaymentResponse,
    PaymentUpdate,
    SRCDecisionRequest,
    SRCDecisionResponse,
)
from symposium.modules.advisors.schemas import AdvisorResponse
from symposium.modules.approvals import ApprovalStatus
from symposium.modules.judges.schemas import JudgeResponse
from symposium.modules.students.schemas import StudentSummary

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/advisors", response_model=list[AdvisorResponse], summary="List Advisors")
async def list_advisors(
    status: ApprovalStatus | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> list[AdvisorResponse]:
    try:
        return await service.list_advisors(db, status)
    except Exception as e:
        logger.exception(f"Unexpected error listing advisors: {e}")
        raise internal_error() from e


@router.get("/students", response_model=list[StudentSummary], summary="List Students")
async def list_students(
    status: ApprovalStatus | None = Query(None),
    src_requested: bool | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> list[StudentSummary]:
    try:
        return await service.list_students(db, status, src_requested)
    except Exception as e:
        logger.exception(f"Unexpected error listing students: {e}")
        raise internal_error() from e


@router.get("/judges", response_model=list[JudgeResponse], summary="List Judges")
async def list_judges(
    status: ApprovalStatus | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> list[JudgeResponse]:
    try:
        return await service.list_judges(db, status)
    except Exception as e:
        logger.exception(f"Unexpected error listing judges: {e}")
        raise internal_error() from e


@router.get("/stats", response_model=DashboardStats, summary="Dashboard Statistics")
async def get_stats(db: AsyncSession = Depends(get_db)) -> DashboardStats:
    try:
        return await service.get_dashboard_stats(db)
    except Exception as e:
        logger.exception(f"Unexpected error building dashboard stats: {e}")
        raise internal_error() from e


async def _decide_advisor(
    db: AsyncSession, context: AppContext, advisor_id: UUID, decision: ApprovalStatus
) -> DecisionResponse:
    try:
        return await service.decide_advisor(db, context.mailer, advisor_id, decision)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error deciding advisor {advisor_id}: {e}")
        raise internal_error() from e


async def _decide_judge(
    db: AsyncSession, context: AppContext, judge_id: UUID, decision: ApprovalStatus
) -> DecisionResponse:
    try:
        return await service.decide_judge(db, context.mailer, judge_id, decision)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error deciding judge {judge_id}: {e}")
        raise internal_error() from e


@router.post(
    "/advisors/{advisor_id}/approve", response_model=DecisionResponse, summary="Approve Advisor"
)
async def approve_advisor(
    advisor_id: UUID,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> DecisionResponse:
    return await _decide_advisor(db, context, advisor_id, ApprovalStatus.APPROVED)


@router.post(
    "/advisors/{advisor_id}/reject", response_model=DecisionResponse, summary="Reject Advisor"
)
async def reject_advisor(
    advisor_id: UUID,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> DecisionResponse:
    return await _decide_advisor(db, context, advisor_id, ApprovalStatus.REJECTED)


@router.post("/judges/{judge_id}/approve", response_model=DecisionResponse, summary="Approve Judge")
async def approve_judge(
    judge_id: UUID,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> DecisionResponse:
    return await _decide_judge(db, context, judge_id, ApprovalStatus.APPROVED)


@router.post("/judges/{judge_id}/reject", response_model=DecisionResponse, summary="Reject Judge")
async def reject_judge(
    judge_id: UUID,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> DecisionResponse:
    return await _decide_judge(db, context, judge_id, ApprovalStatus.REJECTED)


@router.put(
    "/students/{student_id}/payment",
    response_model=PaymentResponse,
    summary="Set Payment Status",
)
async def set_payment_status(
    student_id: UUID,
    data: PaymentUpdate,
    db: AsyncSession = Depends(get_db),
) -> PaymentResponse:
    try:
        return await service.set_payment_status(db, student_id, data.payment_status)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error setting payment for {student_id}: {e}")
        raise internal_error() from e


@router.put(
    "/students/{student_id}/src",
    response_model=SRCDecisionResponse,
    summary="Decide SRC Request",
)
async def decide_src(
    student_id: UUID,
    data: SRCDecisionRequest,
    user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> SRCDecisionResponse:
    try:
        return await service.decide_src(db, user.id, student_id, data.decision, data.notes)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error deciding SRC for {student_id}: {e}")
        raise internal_error() from e
