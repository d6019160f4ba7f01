from fastapi import APIRouter

from symposium.modules.admin.router import router as admin_router
from symposium.modules.advisors.router import router as advisors_router
from symposium.modules.auth import router as auth_router
from symposium.modules.invitations.router import router as invitations_router
from symposium.modules.judges.router import router as judges_router
from symposium.modules.registration.router import router as registration_router
from symposium.modules.schools.router import router as schools_router
from symposium.modules.students.router import router as students_router

api_router = APIRouter()

api_router.include_router(auth_router, tags=["Authentication"])

api_router.include_router(registration_router, prefix="/register", tags=["Registration"])

api_router.include_router(schools_router, prefix="/schools", tags=["Schools"])

api_router.include_router(advisors_router, prefix="/advisors", tags=["Advisors"])

api_router.include_router(students_router, prefix="/students", tags=["Students"])

api_router.include_router(judges_router, prefix="/judges", tags=["Judges"])

api_router.include_router(invitations_router, tags=["Invitations"])

api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])
