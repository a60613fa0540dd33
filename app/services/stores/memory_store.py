"""
In-process reading store for local development and tests
"""
import asyncio
import logging
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from ...core.exceptions import ResourceNotFoundException
from ...models.article import Article, ArticleRef
from ...models.highlight import Highlight
from ...models.reading_analytics import ReadingAggregate
from ...models.user import StudentRef, User
from .base import ReadingStore

logger = logging.getLogger(__name__)


class InMemoryReadingStore(ReadingStore):
    """
    Keeps every collection in dictionaries owned by one event loop.

    Reads hand out copies so callers never mutate stored state. The
    aggregate upsert holds an asyncio.Lock scoped to the (article, student)
    pair for the whole read-modify-write.
    """

    def __init__(self):
        self._articles: Dict[str, Article] = {}
        self._users: Dict[str, User] = {}
        self._aggregates: Dict[str, ReadingAggregate] = {}
        self._highlights: Dict[str, Highlight] = {}
        self._pair_locks: Dict[Tuple[str, str], asyncio.Lock] = {}

    # Seeding (articles and users are owned by other parts of the application)

    def add_article(self, article: Article) -> Article:
        self._articles[article.id] = article.model_copy(deep=True)
        return article

    def add_user(self, user: User) -> User:
        self._users[user.id] = user.model_copy(deep=True)
        return user

    # Articles

    async def find_articles_by_owner(self, teacher_id: str) -> List[Article]:
        return [
            article.model_copy(deep=True)
            for article in self._articles.values()
            if article.created_by == teacher_id
        ]

    async def find_article_by_id(self, article_id: str) -> Optional[Article]:
        article = self._articles.get(article_id)
        return article.model_copy(deep=True) if article else None

    # Reading aggregates

    def _with_student(self, aggregate: ReadingAggregate) -> ReadingAggregate:
        copy = aggregate.model_copy(deep=True)
        user = self._users.get(aggregate.student_id)
        if user is not None:
            copy.student = StudentRef(id=user.id, name=user.name, email=user.email)
        return copy

    def _with_article(self, aggregate: ReadingAggregate) -> ReadingAggregate:
        copy = aggregate.model_copy(deep=True)
        article = self._articles.get(aggregate.article_id)
        if article is not None:
            copy.article = ArticleRef.from_article(article)
        return copy

    async def find_aggregates_by_article_ids(self, article_ids: Iterable[str]) -> List[ReadingAggregate]:
        wanted = set(article_ids)
        return [
            self._with_student(aggregate)
            for aggregate in self._aggregates.values()
            if aggregate.article_id in wanted
        ]

    async def find_aggregates_by_student_id(self, student_id: str) -> List[ReadingAggregate]:
        return [
            self._with_article(aggregate)
            for aggregate in self._aggregates.values()
            if aggregate.student_id == student_id
        ]

    async def find_aggregates_by_article_id(self, article_id: str) -> List[ReadingAggregate]:
        return await self.find_aggregates_by_article_ids([article_id])

    def _pair_lock(self, article_id: str, student_id: str) -> asyncio.Lock:
        return self._pair_locks.setdefault((article_id, student_id), asyncio.Lock())

    async def upsert_aggregate(
        self,
        article_id: str,
        student_id: str,
        duration: int,
        now: datetime,
        session_start: Optional[datetime] = None,
        session_end: Optional[datetime] = None
    ) -> ReadingAggregate:
        key = ReadingAggregate.pair_key(article_id, student_id)

        async with self._pair_lock(article_id, student_id):
            existing = self._aggregates.get(key)
            if existing is not None:
                aggregate = existing.model_copy(deep=True)
                aggregate.add_activity(duration, now, session_start, session_end)
            else:
                aggregate = ReadingAggregate.first_activity(
                    article_id, student_id, duration, now, session_start, session_end
                )
            # Yield while holding the lock so contending writers queue up
            await asyncio.sleep(0)
            self._aggregates[key] = aggregate

        logger.debug(f"Upserted aggregate {key} (views={aggregate.views})")
        return aggregate.model_copy(deep=True)

    # Highlights

    async def create_highlight(self, highlight: Highlight) -> Highlight:
        stored = highlight.model_copy(update={"id": highlight.id or uuid.uuid4().hex}, deep=True)
        self._highlights[stored.id] = stored
        return stored.model_copy(deep=True)

    async def find_highlights(
        self,
        student_id: str,
        article_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Highlight]:
        highlights = [
            h.model_copy(deep=True)
            for h in self._highlights.values()
            if h.student_id == student_id and (not article_id or h.article_id == article_id)
        ]
        highlights.sort(key=lambda h: h.created_at, reverse=True)
        return highlights[:limit] if limit else highlights

    async def find_highlight(self, highlight_id: str, student_id: str) -> Optional[Highlight]:
        highlight = self._highlights.get(highlight_id)
        if highlight is None or highlight.student_id != student_id:
            return None
        return highlight.model_copy(deep=True)

    async def update_highlight_note(self, highlight_id: str, note: Optional[str]) -> Highlight:
        highlight = self._highlights.get(highlight_id)
        if highlight is None:
            raise ResourceNotFoundException("Highlight not found", details={"highlight_id": highlight_id})
        highlight.note = note
        return highlight.model_copy(deep=True)

    async def delete_highlight(self, highlight_id: str) -> None:
        self._highlights.pop(highlight_id, None)
