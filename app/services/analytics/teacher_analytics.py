"""
Teacher dashboard rollups

Everything here is recomputed from the reading aggregates of the teacher's
articles on every request; nothing is cached or persisted.
"""
import logging
from collections import OrderedDict
from datetime import timedelta
from typing import Dict, List, Optional

from ...core.clock import EPOCH, Clock
from ...core.config import settings
from ...core.exceptions import AuthenticationException
from ...models.article import Article
from ...models.reading_analytics import (
    ArticleViews,
    CategoryCount,
    CategoryViews,
    DailyEngagement,
    ReadingAggregate,
    StudentProgressEntry,
    TeacherAnalytics,
    TeacherOverview,
    seconds_to_minutes,
)
from ..stores.base import ReadingStore

logger = logging.getLogger(__name__)


class TeacherAnalyticsService:
    """Builds the teacher analytics view-model"""

    def __init__(self, store: ReadingStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or Clock()

    async def build_teacher_analytics(self, teacher_id: Optional[str]) -> TeacherAnalytics:
        if not teacher_id:
            raise AuthenticationException("Teacher authentication required")

        articles = await self.store.find_articles_by_owner(teacher_id)
        logger.info(f"Found {len(articles)} articles for teacher {teacher_id}")

        aggregates: List[ReadingAggregate] = []
        if articles:
            aggregates = await self.store.find_aggregates_by_article_ids([a.id for a in articles])
        logger.info(f"Found {len(aggregates)} analytics records")

        views_by_article = self.views_by_article(aggregates)
        most_viewed = self.most_viewed_categories(articles, views_by_article)

        analytics = TeacherAnalytics(
            overview=TeacherOverview(
                total_articles=len(articles),
                total_views=sum(a.views for a in aggregates),
                total_students=len({a.student_id for a in aggregates})
            ),
            articles_vs_views=self.articles_vs_views(articles, views_by_article),
            category_distribution=self.category_distribution(articles),
            most_viewed_categories=most_viewed,
            top3_categories=most_viewed[:settings.TOP_CATEGORIES_LIMIT],
            student_wise_progress=self.student_wise_progress(aggregates),
            daily_engagement=self.daily_engagement(aggregates)
        )

        logger.debug(
            f"Teacher analytics calculated: articles={analytics.overview.total_articles} "
            f"views={analytics.overview.total_views} students={analytics.overview.total_students}"
        )
        return analytics

    @staticmethod
    def views_by_article(aggregates: List[ReadingAggregate]) -> Dict[str, int]:
        totals: Dict[str, int] = {}
        for aggregate in aggregates:
            totals[aggregate.article_id] = totals.get(aggregate.article_id, 0) + aggregate.views
        return totals

    @staticmethod
    def articles_vs_views(articles: List[Article], views_by_article: Dict[str, int]) -> List[ArticleViews]:
        ranking = [
            ArticleViews(title=article.title, views=views_by_article.get(article.id, 0))
            for article in articles
        ]
        # sorted() is stable, so ties keep article order
        return sorted(ranking, key=lambda item: item.views, reverse=True)

    @staticmethod
    def category_distribution(articles: List[Article]) -> List[CategoryCount]:
        counts: Dict[str, int] = OrderedDict()
        for article in articles:
            category = article.category.value
            counts[category] = counts.get(category, 0) + 1
        return [CategoryCount(category=category, count=count) for category, count in counts.items()]

    @staticmethod
    def most_viewed_categories(articles: List[Article], views_by_article: Dict[str, int]) -> List[CategoryViews]:
        totals: Dict[str, int] = OrderedDict()
        for article in articles:
            category = article.category.value
            totals[category] = totals.get(category, 0) + views_by_article.get(article.id, 0)
        ranking = [CategoryViews(category=category, views=views) for category, views in totals.items()]
        return sorted(ranking, key=lambda item: item.views, reverse=True)

    @staticmethod
    def student_wise_progress(aggregates: List[ReadingAggregate]) -> List[StudentProgressEntry]:
        progress: Dict[str, dict] = OrderedDict()

        for aggregate in aggregates:
            entry = progress.get(aggregate.student_id)
            if entry is None:
                student = aggregate.student
                entry = progress[aggregate.student_id] = {
                    "student_id": aggregate.student_id,
                    "student_name": student.name if student else "Unknown",
                    "student_email": student.email if student else "Unknown",
                    "articles": set(),
                    "views": 0,
                    "seconds": 0,
                    "last_activity": EPOCH,
                }

            entry["articles"].add(aggregate.article_id)
            entry["views"] += aggregate.views
            entry["seconds"] += aggregate.duration
            if aggregate.last_viewed and aggregate.last_viewed > entry["last_activity"]:
                entry["last_activity"] = aggregate.last_viewed

        ranking = [
            StudentProgressEntry(
                student_id=entry["student_id"],
                student_name=entry["student_name"],
                student_email=entry["student_email"],
                total_articles_read=len(entry["articles"]),
                total_views=entry["views"],
                total_time_spent=seconds_to_minutes(entry["seconds"]),
                last_activity=entry["last_activity"]
            )
            for entry in progress.values()
        ]
        return sorted(ranking, key=lambda item: item.total_views, reverse=True)

    def daily_engagement(self, aggregates: List[ReadingAggregate]) -> List[DailyEngagement]:
        """Views per UTC calendar day of last view, for the trailing window ending today"""
        views_by_day: Dict = {}
        for aggregate in aggregates:
            if aggregate.last_viewed is None:
                continue
            day = aggregate.last_viewed.date()
            views_by_day[day] = views_by_day.get(day, 0) + aggregate.views

        today = self.clock.today()
        window = settings.ENGAGEMENT_WINDOW_DAYS
        days = [today - timedelta(days=offset) for offset in range(window - 1, -1, -1)]
        return [DailyEngagement(date=day.isoformat(), views=views_by_day.get(day, 0)) for day in days]
