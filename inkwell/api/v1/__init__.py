"""API v1 module.

Contains all v1 API routes.
"""

from fastapi import APIRouter

from inkwell.api.v1.blogs import router as blogs_router

router = APIRouter(prefix="/api/v1")
router.include_router(blogs_router)

__all__ = ["router"]
