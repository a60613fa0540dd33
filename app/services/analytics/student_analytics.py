"""
Student dashboard rollups
"""
import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from ...core.clock import EPOCH
from ...core.config import settings
from ...core.exceptions import AuthenticationException
from ...models.article import ArticleCategory
from ...models.reading_analytics import (
    CategoryStats,
    CategoryTime,
    ReadingAggregate,
    RecentActivity,
    RecentArticle,
    RecentArticleRef,
    StudentAnalytics,
    StudentOverview,
    StudentProgress,
    seconds_to_minutes,
)
from ..stores.base import ReadingStore

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = ArticleCategory.other.value


def resolved_category(aggregate: ReadingAggregate) -> str:
    """Category of the aggregate's article, "Other" when the article is gone"""
    if aggregate.article and aggregate.article.category:
        return aggregate.article.category
    return FALLBACK_CATEGORY


def most_recent_first(aggregates: List[ReadingAggregate], limit: int) -> List[ReadingAggregate]:
    """Aggregates whose article still resolves, latest view first"""
    readable = [a for a in aggregates if a.article is not None]
    readable.sort(key=lambda a: a.last_viewed or EPOCH, reverse=True)
    return readable[:limit]


class StudentAnalyticsService:
    """Builds the student-facing analytics and progress views"""

    def __init__(self, store: ReadingStore):
        self.store = store

    async def _load(self, student_id: Optional[str]) -> List[ReadingAggregate]:
        if not student_id:
            raise AuthenticationException("Student authentication required")
        aggregates = await self.store.find_aggregates_by_student_id(student_id)
        logger.info(f"Found {len(aggregates)} analytics records for student {student_id}")
        return aggregates

    async def build_student_analytics(self, student_id: Optional[str]) -> StudentAnalytics:
        aggregates = await self._load(student_id)

        seconds_by_category: Dict[str, int] = OrderedDict()
        for aggregate in aggregates:
            category = resolved_category(aggregate)
            seconds_by_category[category] = seconds_by_category.get(category, 0) + aggregate.duration

        recent_articles = [
            RecentArticle(
                article_id=RecentArticleRef(
                    title=aggregate.article.title,
                    category=aggregate.article.category
                ),
                views=aggregate.views,
                time_spent=seconds_to_minutes(aggregate.duration),
                last_viewed=aggregate.last_viewed
            )
            for aggregate in most_recent_first(aggregates, settings.RECENT_ARTICLES_LIMIT)
        ]

        return StudentAnalytics(
            overview=StudentOverview(
                total_articles_read=len(aggregates),
                total_time_spent=seconds_to_minutes(sum(a.duration for a in aggregates))
            ),
            time_per_category=[
                CategoryTime(category=category, time=seconds)
                for category, seconds in seconds_by_category.items()
            ],
            recent_articles=recent_articles
        )

    async def build_student_progress(self, student_id: Optional[str]) -> StudentProgress:
        """Per-category counters view of the same aggregates"""
        aggregates = await self._load(student_id)

        counters: Dict[str, dict] = OrderedDict()
        for aggregate in aggregates:
            counter = counters.setdefault(
                resolved_category(aggregate),
                {"articles_read": 0, "seconds": 0, "views": 0}
            )
            counter["articles_read"] += 1
            counter["seconds"] += aggregate.duration
            counter["views"] += aggregate.views

        return StudentProgress(
            total_articles_read=len(aggregates),
            total_time_spent=seconds_to_minutes(sum(a.duration for a in aggregates)),
            total_views=sum(a.views for a in aggregates),
            category_stats={
                category: CategoryStats(
                    articles_read=counter["articles_read"],
                    time_spent=seconds_to_minutes(counter["seconds"]),
                    views=counter["views"]
                )
                for category, counter in counters.items()
            },
            recent_activity=[
                RecentActivity(
                    article_title=aggregate.article.title,
                    category=aggregate.article.category,
                    views=aggregate.views,
                    duration=seconds_to_minutes(aggregate.duration),
                    last_viewed=aggregate.last_viewed
                )
                for aggregate in most_recent_first(aggregates, settings.RECENT_ARTICLES_LIMIT)
            ]
        )
