"""
Reading activity recorder
"""
import logging
from datetime import datetime
from typing import Optional

from ...core.clock import Clock
from ...core.exceptions import AuthenticationException, ResourceNotFoundException
from ...core.identifiers import validate_identifier
from ...models.reading_analytics import ActivitySummary, ReadingAggregate
from ..stores.base import ReadingStore

logger = logging.getLogger(__name__)


class SessionRecorder:
    """Merges view and timed-session events into per-(article, student) aggregates"""

    def __init__(self, store: ReadingStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or Clock()

    async def record(
        self,
        article_id: str,
        student_id: Optional[str],
        duration: Optional[int] = None,
        session_start: Optional[datetime] = None,
        session_end: Optional[datetime] = None
    ) -> ReadingAggregate:
        """
        Record one reading activity and return the updated aggregate

        Raises:
            AuthenticationException: If no student identity is present
            InvalidReferenceException: If the article ID is malformed
            ResourceNotFoundException: If the article does not exist
        """
        if not student_id:
            raise AuthenticationException("Student authentication required")
        validate_identifier(article_id, "article ID")

        article = await self.store.find_article_by_id(article_id)
        if article is None:
            raise ResourceNotFoundException("Article not found", details={"article_id": article_id})

        duration = duration or 0
        logger.info(f"Tracking activity: article={article_id} student={student_id} duration={duration}s")

        return await self.store.upsert_aggregate(
            article_id,
            student_id,
            duration,
            now=self.clock.now(),
            session_start=session_start,
            session_end=session_end
        )

    async def record_activity(
        self,
        article_id: str,
        student_id: Optional[str],
        duration: Optional[int] = None,
        session_start: Optional[datetime] = None,
        session_end: Optional[datetime] = None
    ) -> ActivitySummary:
        """Record one reading activity and return the pair's running totals"""
        aggregate = await self.record(article_id, student_id, duration, session_start, session_end)
        return ActivitySummary.from_aggregate(aggregate)
