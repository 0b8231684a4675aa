"""API v1 router - aggregates all v1 endpoints."""

from fastapi import APIRouter

from ..tasks import router as tasks_router

# Create the v1 router
router = APIRouter()

router.include_router(tasks_router, prefix="/tasks", tags=["Tasks"])

__all__ = ["router"]
