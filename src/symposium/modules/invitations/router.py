"""
Invitations Router

Sending signature invitations (authenticated) and the public token-gated
forms the invited parties fill in.

Endpoints:
- POST /send-statement-invitation - Student invites a teacher, mentor or parent
- POST /send-photo-release-invitation - Student invites a parent
- POST /send-chaperone-invitation - Advisor invites the school's chaperone
- GET/POST /statement-form?token=...
- GET/POST /photo-release-form?token=...
- GET/POST /chaperone-form?token=...

Security:
- Send endpoints are rate limited per sender
- Form endpoints need no account; the token is the credential
"""

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.auth import CurrentUser, require_advisor, require_student
from symposium.core.context import AppContext, get_context
from symposium.core.database import get_db
from symposium.core.errors import ServiceError, internal_error, to_http_exception
from symposium.core.rate_limit import enforce_rate_limit
from symposium.modules.invitations import service
from symposium.modules.invitations.schemas import (
    ChaperoneFormResponse,
    ChaperoneFormSubmission,
    FormSubmittedResponse,
    InvitationSentResponse,
    PhotoReleaseFormResponse,
    PhotoReleaseFormSubmission,
    SendChaperoneInvitationRequest,
    SendPhotoReleaseInvitationRequest,
    SendStatementInvitationRequest,
    StatementFormResponse,
    StatementFormSubmission,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# 10 invitations per sender per hour
INVITE_RATE_LIMIT = 10
INVITE_RATE_WINDOW_SECONDS = 3600

_FORM_RESPONSES = {
    400: {"description": "Malformed token"},
    403: {"description": "Token does not match or has expired"},
    404: {"description": "Record not found"},
}
_SUBMIT_RESPONSES = {**_FORM_RESPONSES, 409: {"description": "Already signed"}}
_SEND_RESPONSES = {
    409: {"description": "Already signed"},
    429: {"description": "Too many invitations"},
    500: {"description": "Email could not be sent"},
}


def _raise(e: Exception, action: str) -> NoReturn:
    if isinstance(e, ServiceError):
        raise to_http_exception(e) from e
    logger.exception(f"Unexpected error {action}: {e}")
    raise internal_error() from e


# ============================================
# Sending
# ============================================


@router.post(
    "/send-statement-invitation",
    response_model=InvitationSentResponse,
    summary="Send Statement of Outside Assistance Invitation",
    responses=_SEND_RESPONSES,
)
async def send_statement_invitation(
    data: SendStatementInvitationRequest,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> InvitationSentResponse:
    """
    Email a signing link to the student's teacher, mentor or parent.

    Re-sending issues a new link; the previous one stops working.
    """
    await enforce_rate_limit(
        context.redis, f"invite:statement:{user.id}", INVITE_RATE_LIMIT, INVITE_RATE_WINDOW_SECONDS
    )
    try:
        return await service.send_statement_invitation(
            db, context.mailer, user.id, data.type, str(data.email)
        )
    except Exception as e:
        _raise(e, "sending statement invitation")


@router.post(
    "/send-photo-release-invitation",
    response_model=InvitationSentResponse,
    summary="Send Photo Release Invitation",
    responses=_SEND_RESPONSES,
)
async def send_photo_release_invitation(
    data: SendPhotoReleaseInvitationRequest,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> InvitationSentResponse:
    await enforce_rate_limit(
        context.redis, f"invite:photo:{user.id}", INVITE_RATE_LIMIT, INVITE_RATE_WINDOW_SECONDS
    )
    try:
        return await service.send_photo_release_invitation(
            db, context.mailer, user.id, str(data.email), team_member=data.team_member
        )
    except Exception as e:
        _raise(e, "sending photo release invitation")


@router.post(
    "/send-chaperone-invitation",
    response_model=InvitationSentResponse,
    summary="Send Chaperone Invitation",
    responses=_SEND_RESPONSES,
)
async def send_chaperone_invitation(
    data: SendChaperoneInvitationRequest,
    user: CurrentUser = Depends(require_advisor),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> InvitationSentResponse:
    await enforce_rate_limit(
        context.redis, f"invite:chaperone:{user.id}", INVITE_RATE_LIMIT, INVITE_RATE_WINDOW_SECONDS
    )
    try:
        return await service.send_chaperone_invitation(
            db,
            context.mailer,
            user.id,
            data.chaperone_name,
            str(data.chaperone_email),
            data.school_name,
        )
    except Exception as e:
        _raise(e, "sending chaperone invitation")


# ============================================
# Token-gated forms
# ============================================


@router.get(
    "/statement-form",
    response_model=StatementFormResponse,
    summary="Load Statement Form",
    responses=_FORM_RESPONSES,
)
async def get_statement_form(
    token: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> StatementFormResponse:
    try:
        return await service.get_statement_form(
            db, token, expiry_hours=context.settings.invitation_expiry_hours
        )
    except Exception as e:
        _raise(e, "loading statement form")


@router.post(
    "/statement-form",
    response_model=FormSubmittedResponse,
    summary="Sign Statement Form",
    responses=_SUBMIT_RESPONSES,
)
async def submit_statement_form(
    data: StatementFormSubmission,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> FormSubmittedResponse:
    try:
        return await service.submit_statement_form(
            db, data, expiry_hours=context.settings.invitation_expiry_hours
        )
    except Exception as e:
        _raise(e, "submitting statement form")


@router.get(
    "/photo-release-form",
    response_model=PhotoReleaseFormResponse,
    summary="Load Photo Release Form",
    responses=_FORM_RESPONSES,
)
async def get_photo_release_form(
    token: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> PhotoReleaseFormResponse:
    try:
        return await service.get_photo_release_form(
            db, token, expiry_hours=context.settings.invitation_expiry_hours
        )
    except Exception as e:
        _raise(e, "loading photo release form")


@router.post(
    "/photo-release-form",
    response_model=FormSubmittedResponse,
    summary="Sign Photo Release Form",
    responses=_SUBMIT_RESPONSES,
)
async def submit_photo_release_form(
    data: PhotoReleaseFormSubmission,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> FormSubmittedResponse:
    try:
        return await service.submit_photo_release_form(
            db, data, expiry_hours=context.settings.invitation_expiry_hours
        )
    except Exception as e:
        _raise(e, "submitting photo release form")


@router.get(
    "/chaperone-form",
    response_model=ChaperoneFormResponse,
    summary="Load Chaperone Confirmation",
    responses=_FORM_RESPONSES,
)
async def get_chaperone_form(
    token: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> ChaperoneFormResponse:
    try:
        return await service.get_chaperone_form(
            db, token, expiry_hours=context.settings.invitation_expiry_hours
        )
    except Exception as e:
        _raise(e, "loading chaperone form")


@router.post(
    "/chaperone-form",
    response_model=FormSubmittedResponse,
    summary="Confirm Chaperone",
    responses=_SUBMIT_RESPONSES,
)
async def submit_chaperone_form(
    data: ChaperoneFormSubmission,
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> FormSubmittedResponse:
    try:
        return await service.submit_chaperone_form(
            db, data.token, data.signature, expiry_hours=context.settings.invitation_expiry_hours
        )
    except Exception as e:
        _raise(e, "confirming chaperone")
