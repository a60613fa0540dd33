"""
Analytics dashboard endpoints
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ....core.clock import Clock
from ....core.responses import success_response
from ....models.reading_analytics import TrackActivityRequest
from ....services.analytics.session_recorder import SessionRecorder
from ....services.analytics.student_analytics import StudentAnalyticsService
from ....services.analytics.teacher_analytics import TeacherAnalyticsService
from ....services.stores.base import ReadingStore
from ...deps import get_clock, get_reading_store
from .auth import get_current_user

router = APIRouter()


@router.get("")
async def get_teacher_analytics(
    current_user_id: str = Depends(get_current_user),
    store: ReadingStore = Depends(get_reading_store),
    clock: Clock = Depends(get_clock)
) -> Dict[str, Any]:
    """
    Dashboard rollup over every article the caller owns:
    - Overview totals
    - Article and category view rankings
    - Per-student progress
    - Trailing 7-day engagement
    """
    service = TeacherAnalyticsService(store, clock)
    analytics = await service.build_teacher_analytics(current_user_id)
    return success_response(analytics=analytics.to_json())


@router.get("/student")
async def get_student_analytics(
    current_user_id: str = Depends(get_current_user),
    store: ReadingStore = Depends(get_reading_store)
) -> Dict[str, Any]:
    """Reading totals, time per category and recently viewed articles of the caller"""
    service = StudentAnalyticsService(store)
    analytics = await service.build_student_analytics(current_user_id)
    return success_response(analytics=analytics.to_json())


@router.post("/track")
async def track_analytics(
    body: TrackActivityRequest,
    current_user_id: str = Depends(get_current_user),
    store: ReadingStore = Depends(get_reading_store),
    clock: Clock = Depends(get_clock)
) -> Dict[str, Any]:
    """Record a view of an article"""
    recorder = SessionRecorder(store, clock)
    aggregate = await recorder.record(body.article_id, current_user_id, body.duration)
    return success_response(analytics=aggregate.to_json())
