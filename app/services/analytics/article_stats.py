"""
Per-article reading statistics for the owning teacher
"""
import logging
from typing import Optional

from ...core.exceptions import AuthenticationException, ResourceNotFoundException
from ...core.identifiers import validate_identifier
from ...models.reading_analytics import ArticleStats, StudentArticleStat, seconds_to_minutes
from ..stores.base import ReadingStore

logger = logging.getLogger(__name__)


class ArticleStatsService:
    """Builds per-student statistics for a single owned article"""

    def __init__(self, store: ReadingStore):
        self.store = store

    async def build_article_stats(self, article_id: str, teacher_id: Optional[str]) -> ArticleStats:
        """
        Raises:
            InvalidReferenceException: If the article ID is malformed
            AuthenticationException: If no teacher identity is present
            ResourceNotFoundException: If the article is missing or owned by someone else
        """
        validate_identifier(article_id, "article ID")
        if not teacher_id:
            raise AuthenticationException("Teacher authentication required")

        article = await self.store.find_article_by_id(article_id)
        if article is None or article.created_by != teacher_id:
            raise ResourceNotFoundException("Article not found", details={"article_id": article_id})

        aggregates = await self.store.find_aggregates_by_article_id(article_id)
        logger.info(f"Found {len(aggregates)} analytics records for article {article_id}")

        return ArticleStats(
            article_title=article.title,
            total_views=sum(a.views for a in aggregates),
            total_duration=sum(a.duration for a in aggregates),
            unique_students=len(aggregates),
            student_stats=[
                StudentArticleStat(
                    student_name=a.student.name if a.student else "Unknown",
                    student_email=a.student.email if a.student else "Unknown",
                    views=a.views,
                    duration=seconds_to_minutes(a.duration),
                    last_viewed=a.last_viewed,
                    sessions=len(a.session_data)
                )
                for a in aggregates
            ]
        )
