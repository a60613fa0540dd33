"""
Reading session tracking endpoints
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ....core.clock import Clock
from ....core.responses import success_response
from ....models.reading_analytics import TrackActivityRequest
from ....services.analytics.article_stats import ArticleStatsService
from ....services.analytics.session_recorder import SessionRecorder
from ....services.analytics.student_analytics import StudentAnalyticsService
from ....services.stores.base import ReadingStore
from ...deps import get_clock, get_reading_store
from .auth import get_current_user

router = APIRouter()


@router.post("")
async def track_article_view(
    body: TrackActivityRequest,
    current_user_id: str = Depends(get_current_user),
    store: ReadingStore = Depends(get_reading_store),
    clock: Clock = Depends(get_clock)
) -> Dict[str, Any]:
    """Record a timed reading session"""
    recorder = SessionRecorder(store, clock)
    summary = await recorder.record_activity(
        body.article_id,
        current_user_id,
        body.duration,
        session_start=body.session_start,
        session_end=body.session_end
    )
    return success_response("View tracked successfully", analytics=summary.to_json())


@router.get("/article/{article_id}")
async def get_article_stats(
    article_id: str,
    current_user_id: str = Depends(get_current_user),
    store: ReadingStore = Depends(get_reading_store)
) -> Dict[str, Any]:
    """Per-student statistics for one of the caller's articles"""
    service = ArticleStatsService(store)
    stats = await service.build_article_stats(article_id, current_user_id)
    return success_response(stats=stats.to_json())


@router.get("/student")
async def get_student_progress(
    current_user_id: str = Depends(get_current_user),
    store: ReadingStore = Depends(get_reading_store)
) -> Dict[str, Any]:
    """Caller's reading progress with per-category counters"""
    service = StudentAnalyticsService(store)
    progress = await service.build_student_progress(current_user_id)
    return success_response(progress=progress.to_json())
