"""
Persistence contract used by the analytics services
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from ...models.article import Article
from ...models.highlight import Highlight
from ...models.reading_analytics import ReadingAggregate


class ReadingStore(ABC):
    """Articles, per-(article, student) reading aggregates and highlights"""

    # Articles

    @abstractmethod
    async def find_articles_by_owner(self, teacher_id: str) -> List[Article]:
        ...

    @abstractmethod
    async def find_article_by_id(self, article_id: str) -> Optional[Article]:
        ...

    # Reading aggregates

    @abstractmethod
    async def find_aggregates_by_article_ids(self, article_ids: Iterable[str]) -> List[ReadingAggregate]:
        """Aggregates of the given articles, each with `student` resolved when possible"""

    @abstractmethod
    async def find_aggregates_by_student_id(self, student_id: str) -> List[ReadingAggregate]:
        """Aggregates of one student, each with `article` resolved when possible"""

    @abstractmethod
    async def find_aggregates_by_article_id(self, article_id: str) -> List[ReadingAggregate]:
        """Aggregates of one article, each with `student` resolved when possible"""

    @abstractmethod
    async def upsert_aggregate(
        self,
        article_id: str,
        student_id: str,
        duration: int,
        now: datetime,
        session_start: Optional[datetime] = None,
        session_end: Optional[datetime] = None
    ) -> ReadingAggregate:
        """
        Atomically merge one activity into the (article, student) aggregate,
        creating it on first activity. Concurrent calls for the same pair must
        never create two aggregates or lose an increment.
        """

    # Highlights

    @abstractmethod
    async def create_highlight(self, highlight: Highlight) -> Highlight:
        ...

    @abstractmethod
    async def find_highlights(
        self,
        student_id: str,
        article_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Highlight]:
        """Student's highlights, newest first"""

    @abstractmethod
    async def find_highlight(self, highlight_id: str, student_id: str) -> Optional[Highlight]:
        """A highlight only if it belongs to the student"""

    @abstractmethod
    async def update_highlight_note(self, highlight_id: str, note: Optional[str]) -> Highlight:
        ...

    @abstractmethod
    async def delete_highlight(self, highlight_id: str) -> None:
        ...
