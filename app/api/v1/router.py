"""
Main API router
"""
from fastapi import APIRouter

from ...core.responses import ErrorResponse
from .endpoints import analytics, highlights, tracking

api_router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)

# Include all endpoint routers
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(tracking.router, prefix="/tracking", tags=["tracking"])
api_router.include_router(highlights.router, prefix="/highlights", tags=["highlights"])
