"""
API v1 routers.
"""

from fastapi import APIRouter

from .files import router as files_router

router = APIRouter(prefix="/v1")
router.include_router(files_router)

__all__ = ["router", "files_router"]
