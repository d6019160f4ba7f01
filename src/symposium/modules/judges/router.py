"""
Judge Router

Endpoints:
- GET /judges/me - The signed-in judge's profile and approval status
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.auth import CurrentUser, require_roles
from symposium.core.database import get_db
from symposium.core.roles import UserRole
from symposium.modules.judges import repository
from symposium.modules.judges.schemas import JudgeResponse

router = APIRouter()


@router.get("/me", response_model=JudgeResponse, summary="Judge Profile")
async def get_me(
    user: CurrentUser = Depends(require_roles(UserRole.JUDGE)),
    db: AsyncSession = Depends(get_db),
) -> JudgeResponse:
    judge = await repository.get_by_id(db, user.id)
    if judge is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "JUDGE_NOT_FOUND", "message": "Judge not found"},
        )
    return JudgeResponse.model_validate(judge)
