"""API routes."""

from fastapi import APIRouter

from portal.api.routes import auth, settings, users

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(settings.router, prefix="/settings", tags=["settings"])
