from fastapi import APIRouter

from thesis_archive.api.v1.endpoints import auth, health, programs, settings, thesis, users

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(thesis.router, prefix="/thesis", tags=["Theses"])
api_router.include_router(users.router, prefix="/users", tags=["User Management"])
api_router.include_router(programs.router, prefix="/programs", tags=["Programs"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
