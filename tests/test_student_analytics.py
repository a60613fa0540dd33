"""Unit tests for the student analytics and progress views."""

from datetime import timedelta

import pytest

from app.core.exceptions import AuthenticationException
from app.models.article import ArticleCategory
from app.services.analytics.session_recorder import SessionRecorder
from app.services.analytics.student_analytics import StudentAnalyticsService
from tests.conftest import NOW, STUDENT_1, STUDENT_2, make_article


@pytest.fixture
def recorder(store, clock) -> SessionRecorder:
    return SessionRecorder(store, clock)


@pytest.fixture
def service(store) -> StudentAnalyticsService:
    return StudentAnalyticsService(store)


@pytest.fixture
def library(store) -> None:
    store.add_article(make_article("bio", "Biology", category=ArticleCategory.science))
    store.add_article(make_article("algebra", "Algebra", category=ArticleCategory.math))
    store.add_article(make_article("physics", "Physics", category=ArticleCategory.science))
    store.add_article(make_article("retired", "Retired", category=ArticleCategory.history))


class TestStudentAnalytics:

    @pytest.mark.asyncio
    async def test_student_without_activity(self, service) -> None:
        analytics = await service.build_student_analytics(STUDENT_1)

        assert analytics.to_json() == {
            "overview": {"totalArticlesRead": 0, "totalTimeSpent": 0},
            "timePerCategory": [],
            "recentArticles": [],
        }

    @pytest.mark.asyncio
    async def test_totals_and_time_per_category(self, service, recorder, library) -> None:
        await recorder.record("bio", STUDENT_1, 100)
        await recorder.record("algebra", STUDENT_1, 45)
        await recorder.record("physics", STUDENT_1, 200)
        await recorder.record("bio", STUDENT_2, 999)

        analytics = await service.build_student_analytics(STUDENT_1)

        assert analytics.overview.total_articles_read == 3
        assert analytics.overview.total_time_spent == 6  # 345 seconds
        assert [(c.category, c.time) for c in analytics.time_per_category] == [
            ("Science", 300),
            ("Math", 45),
        ]

    @pytest.mark.asyncio
    async def test_unresolved_article_falls_back_to_other(self, store, service, recorder, library) -> None:
        await recorder.record("bio", STUDENT_1, 60)
        await recorder.record("retired", STUDENT_1, 120)
        del store._articles["retired"]

        analytics = await service.build_student_analytics(STUDENT_1)

        assert analytics.overview.total_articles_read == 2
        assert analytics.overview.total_time_spent == 3
        assert [(c.category, c.time) for c in analytics.time_per_category] == [
            ("Science", 60),
            ("Other", 120),
        ]
        assert [r.article_id.title for r in analytics.recent_articles] == ["Biology"]

    @pytest.mark.asyncio
    async def test_recent_articles_latest_first_and_capped(self, store, service, recorder, clock) -> None:
        for index in range(12):
            article_id = f"article-{index}"
            store.add_article(make_article(article_id, f"Article {index}"))
            await recorder.record(article_id, STUDENT_1, 90)
            clock.advance(minutes=1)

        analytics = await service.build_student_analytics(STUDENT_1)
        recent = analytics.recent_articles

        assert len(recent) == 10
        assert [r.article_id.title for r in recent] == [f"Article {i}" for i in range(11, 1, -1)]
        assert recent[0].last_viewed == NOW + timedelta(minutes=11)
        assert recent[0].time_spent == 2
        assert recent[0].to_json()["articleId"] == {"title": "Article 11", "category": "Science"}

    @pytest.mark.asyncio
    async def test_requires_student_identity(self, service) -> None:
        with pytest.raises(AuthenticationException):
            await service.build_student_analytics("")


class TestStudentProgress:

    @pytest.mark.asyncio
    async def test_category_counters(self, service, recorder, library) -> None:
        await recorder.record("bio", STUDENT_1, 50)
        await recorder.record("bio", STUDENT_1, 50)
        await recorder.record("physics", STUDENT_1, 80)
        await recorder.record("algebra", STUDENT_1, 20)

        progress = (await service.build_student_progress(STUDENT_1)).to_json()

        assert progress["totalArticlesRead"] == 3
        assert progress["totalViews"] == 4
        assert progress["totalTimeSpent"] == 3  # 200 seconds
        assert progress["categoryStats"] == {
            "Science": {"articlesRead": 2, "timeSpent": 3, "views": 3},
            "Math": {"articlesRead": 1, "timeSpent": 0, "views": 1},
        }

    @pytest.mark.asyncio
    async def test_recent_activity_skips_unresolved_articles(self, store, service, recorder, clock, library) -> None:
        await recorder.record("retired", STUDENT_1, 30)
        clock.advance(minutes=5)
        await recorder.record("algebra", STUDENT_1, 150)
        del store._articles["retired"]

        progress = await service.build_student_progress(STUDENT_1)

        assert [a.article_title for a in progress.recent_activity] == ["Algebra"]
        assert progress.recent_activity[0].duration == 3
        assert progress.recent_activity[0].category == "Math"
        assert "Other" in progress.category_stats

    @pytest.mark.asyncio
    async def test_rebuilding_is_idempotent(self, service, recorder, library) -> None:
        await recorder.record("bio", STUDENT_1, 50)

        first = await service.build_student_progress(STUDENT_1)
        second = await service.build_student_progress(STUDENT_1)

        assert first == second
