"""
Student Router

The signed-in student's dashboard.

Endpoints:
- GET /students/me - Profile, materials and form status
- PATCH /students/me/project - Edit project details
- PUT /students/me/statement - Save student sections of the statement
- POST /students/me/statement/sign - Student signature
- PUT /students/me/ethics - Save the ethics questionnaire
- POST /students/me/src-request - Request special review committee approval
- POST /students/me/materials/{artifact} - Upload a research artifact
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.auth import CurrentUser, require_student
from symposium.core.context import AppContext, get_context
from symposium.core.database import get_db
from symposium.core.errors import ServiceError, internal_error, to_http_exception
from symposium.modules.students import service
from symposium.modules.students.schemas import (
    EthicsQuestionnaire,
    ProjectUpdate,
    SignatureRequest,
    SRCRequestResponse,
    StatementStudentSections,
    StudentDetail,
)
from symposium.modules.submissions import service as submission_service
from symposium.modules.submissions.artifacts import ARTIFACT_RULES, Artifact
from symposium.modules.submissions.schemas import UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=StudentDetail, summary="Student Dashboard")
async def get_me(
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> StudentDetail:
    try:
        return await service.get_me(db, user.id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error loading profile for {user.id}: {e}")
        raise internal_error() from e


@router.patch("/me/project", response_model=StudentDetail, summary="Update Project Details")
async def update_project(
    data: ProjectUpdate,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> StudentDetail:
    try:
        return await service.update_project(db, user.id, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error updating project for {user.id}: {e}")
        raise internal_error() from e


@router.put(
    "/me/statement",
    response_model=StudentDetail,
    summary="Save Statement of Outside Assistance",
)
async def save_statement(
    data: StatementStudentSections,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> StudentDetail:
    try:
        return await service.save_statement_sections(db, user.id, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error saving statement for {user.id}: {e}")
        raise internal_error() from e


@router.post(
    "/me/statement/sign",
    response_model=StudentDetail,
    summary="Sign Statement of Outside Assistance",
    responses={409: {"description": "Already signed"}},
)
async def sign_statement(
    data: SignatureRequest,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> StudentDetail:
    try:
        return await service.sign_statement(db, user.id, data.signature)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error signing statement for {user.id}: {e}")
        raise internal_error() from e


@router.put(
    "/me/ethics",
    response_model=StudentDetail,
    summary="Save Ethics Questionnaire",
    responses={409: {"description": "Locked after SRC request"}},
)
async def update_ethics(
    data: EthicsQuestionnaire,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> StudentDetail:
    try:
        return await service.update_ethics_questionnaire(db, user.id, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error saving ethics questionnaire for {user.id}: {e}")
        raise internal_error() from e


@router.post(
    "/me/src-request",
    response_model=SRCRequestResponse,
    summary="Request SRC Review",
)
async def request_src_review(
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> SRCRequestResponse:
    try:
        return await service.request_src_approval(db, user.id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error requesting SRC review for {user.id}: {e}")
        raise internal_error() from e


@router.post(
    "/me/materials/{artifact}",
    response_model=UploadResponse,
    summary="Upload Research Artifact",
    description="""
Upload one of the research artifacts.

| Artifact | Formats | Max size |
|---|---|---|
| research_plan | pdf, doc, docx | 10MB |
| abstract | pdf, doc, docx | 5MB |
| presentation | pdf, ppt, pptx, key | 20MB |
| research_report | pdf | 15MB |
| slideshow | pptx | 25MB |

Replacing a research plan after anyone signed the Statement of Outside
Assistance returns 409 `CONFIRMATION_REQUIRED` unless `confirm_replace=true`;
a confirmed replacement clears every signature on that statement.
""",
    responses={
        400: {"description": "Invalid file type"},
        409: {"description": "Confirmation required"},
        413: {"description": "File too large"},
    },
)
async def upload_material(
    artifact: Artifact,
    file: UploadFile = File(...),
    confirm_replace: bool = Form(False),
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> UploadResponse:
    # One byte past the ceiling is enough to reject the file
    content = await file.read(ARTIFACT_RULES[artifact].max_bytes + 1)

    try:
        return await submission_service.upload_artifact(
            db,
            context.storage,
            context.events,
            user.id,
            artifact,
            file.filename,
            content,
            confirm_replace=confirm_replace,
        )
    except ServiceError as e:
        logger.warning(f"Upload of {artifact.value} rejected for {user.id}: {e.error_code}")
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error uploading {artifact.value}: {e}")
        raise internal_error() from e
    finally:
        await file.close()
