"""
Authentication API package.

Combines registration, session and social login routes under /auth.
"""

from fastapi import APIRouter

from witlt.api.auth.registration import router as registration_router
from witlt.api.auth.session import router as session_router
from witlt.api.auth.social import router as social_router

router = APIRouter(prefix="/auth", tags=["auth"])
router.include_router(registration_router)
router.include_router(session_router)
router.include_router(social_router)

__all__ = ["router"]
