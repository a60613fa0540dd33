"""
Reading Analytics Models
"""
import math
from pydantic import Field, field_validator
from typing import Any, Dict, List, Optional, Union
from datetime import datetime

from ..core.clock import ensure_utc
from .article import ArticleRef
from .base import CamelModel
from .user import StudentRef


def seconds_to_minutes(seconds: Union[int, float]) -> int:
    """Whole minutes, rounding half up"""
    return int(math.floor((seconds or 0) / 60 + 0.5))


class SessionEntry(CamelModel):
    """One reading session appended on every recorded activity"""
    start_time: datetime
    end_time: datetime
    duration: int = 0

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_timezone(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ReadingAggregate(CamelModel):
    """Cumulative reading activity of one student on one article"""
    id: str
    article_id: str
    student_id: str
    views: int = 1
    duration: int = 0  # seconds
    last_viewed: Optional[datetime] = None
    session_data: List[SessionEntry] = []

    # Resolved references, never persisted
    article: Optional[ArticleRef] = Field(default=None, exclude=True)
    student: Optional[StudentRef] = Field(default=None, exclude=True)

    @field_validator("last_viewed")
    @classmethod
    def normalize_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value else value

    @staticmethod
    def pair_key(article_id: str, student_id: str) -> str:
        return f"{article_id}:{student_id}"

    @classmethod
    def first_activity(
        cls,
        article_id: str,
        student_id: str,
        duration: int,
        now: datetime,
        session_start: Optional[datetime] = None,
        session_end: Optional[datetime] = None
    ) -> "ReadingAggregate":
        return cls(
            id=cls.pair_key(article_id, student_id),
            article_id=article_id,
            student_id=student_id,
            views=1,
            duration=duration,
            last_viewed=now,
            session_data=[SessionEntry(
                start_time=session_start or now,
                end_time=session_end or now,
                duration=duration
            )]
        )

    def add_activity(
        self,
        duration: int,
        now: datetime,
        session_start: Optional[datetime] = None,
        session_end: Optional[datetime] = None
    ) -> "ReadingAggregate":
        """Merge one more view into this aggregate in place"""
        self.views += 1
        self.duration += duration
        self.last_viewed = now
        self.session_data.append(SessionEntry(
            start_time=session_start or now,
            end_time=session_end or now,
            duration=duration
        ))
        return self

    def to_document(self) -> Dict[str, Any]:
        """Firestore representation (snake_case, native datetimes)"""
        return self.model_dump(exclude={"id"})

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "ReadingAggregate":
        return cls.model_validate({**data, "id": doc_id})


class TrackActivityRequest(CamelModel):
    """Body shared by both activity-tracking routes"""
    article_id: str = Field(..., min_length=1)
    duration: Optional[int] = Field(default=None, ge=0)
    session_start: Optional[datetime] = None
    session_end: Optional[datetime] = None

    @field_validator("duration", mode="before")
    @classmethod
    def round_fractional_seconds(cls, value):
        if isinstance(value, float):
            return int(math.floor(value + 0.5))
        return value

    @field_validator("session_start", "session_end")
    @classmethod
    def normalize_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value else value


class ActivitySummary(CamelModel):
    total_views: int
    total_duration: int
    last_viewed: Optional[datetime] = None

    @classmethod
    def from_aggregate(cls, aggregate: ReadingAggregate) -> "ActivitySummary":
        return cls(
            total_views=aggregate.views,
            total_duration=aggregate.duration,
            last_viewed=aggregate.last_viewed
        )


# Teacher analytics

class TeacherOverview(CamelModel):
    total_articles: int = 0
    total_views: int = 0
    total_students: int = 0


class ArticleViews(CamelModel):
    title: str
    views: int


class CategoryCount(CamelModel):
    category: str
    count: int


class CategoryViews(CamelModel):
    category: str
    views: int


class StudentProgressEntry(CamelModel):
    student_id: str
    student_name: str
    student_email: str
    total_articles_read: int = 0
    total_views: int = 0
    total_time_spent: int = 0  # minutes
    last_activity: datetime


class DailyEngagement(CamelModel):
    date: str  # YYYY-MM-DD
    views: int


class TeacherAnalytics(CamelModel):
    overview: TeacherOverview
    articles_vs_views: List[ArticleViews] = []
    category_distribution: List[CategoryCount] = []
    most_viewed_categories: List[CategoryViews] = []
    top3_categories: List[CategoryViews] = Field(default=[], alias="top3Categories")
    student_wise_progress: List[StudentProgressEntry] = []
    daily_engagement: List[DailyEngagement] = []


# Student analytics

class StudentOverview(CamelModel):
    total_articles_read: int = 0
    total_time_spent: int = 0  # minutes


class CategoryTime(CamelModel):
    category: str
    time: int  # seconds


class RecentArticleRef(CamelModel):
    title: str
    category: str


class RecentArticle(CamelModel):
    article_id: RecentArticleRef
    views: int
    time_spent: int  # minutes
    last_viewed: Optional[datetime] = None


class StudentAnalytics(CamelModel):
    overview: StudentOverview
    time_per_category: List[CategoryTime] = []
    recent_articles: List[RecentArticle] = []


class CategoryStats(CamelModel):
    articles_read: int = 0
    time_spent: int = 0  # minutes
    views: int = 0


class RecentActivity(CamelModel):
    article_title: str
    category: str
    views: int
    duration: int  # minutes
    last_viewed: Optional[datetime] = None


class StudentProgress(CamelModel):
    total_articles_read: int = 0
    total_time_spent: int = 0  # minutes
    total_views: int = 0
    category_stats: Dict[str, CategoryStats] = {}
    recent_activity: List[RecentActivity] = []


# Article stats

class StudentArticleStat(CamelModel):
    student_name: str
    student_email: str
    views: int
    duration: int  # minutes
    last_viewed: Optional[datetime] = None
    sessions: int


class ArticleStats(CamelModel):
    article_title: str
    total_views: int = 0
    total_duration: int = 0  # seconds
    unique_students: int = 0
    student_stats: List[StudentArticleStat] = []
