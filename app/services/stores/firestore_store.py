"""
Cloud Firestore implementation of the reading store
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from firebase_admin import firestore
from pydantic import ValidationError

from ...core.exceptions import PersistenceException
from ...core.firebase_config import get_db
from ...models.article import Article, ArticleRef
from ...models.highlight import Highlight
from ...models.reading_analytics import ReadingAggregate
from ...models.user import StudentRef
from ..base.firestore_service import FirestoreBaseService
from .base import ReadingStore

logger = logging.getLogger(__name__)

ARTICLES_COLLECTION = "articles"
AGGREGATES_COLLECTION = "reading_aggregates"
HIGHLIGHTS_COLLECTION = "highlights"
USERS_COLLECTION = "users"

# Firestore caps the number of values in an "in" filter
IN_QUERY_LIMIT = 30


def chunked(values: List[str], size: int = IN_QUERY_LIMIT) -> List[List[str]]:
    return [values[i:i + size] for i in range(0, len(values), size)]


@firestore.transactional
def _merge_activity(
    transaction,
    doc_ref,
    article_id: str,
    student_id: str,
    duration: int,
    now: datetime,
    session_start: Optional[datetime],
    session_end: Optional[datetime]
) -> ReadingAggregate:
    """Read-modify-write of one aggregate; Firestore retries the whole function on contention"""
    snapshot = doc_ref.get(transaction=transaction)

    if snapshot.exists:
        aggregate = ReadingAggregate.from_document(snapshot.id, snapshot.to_dict())
        aggregate.add_activity(duration, now, session_start, session_end)
    else:
        aggregate = ReadingAggregate.first_activity(
            article_id, student_id, duration, now, session_start, session_end
        )

    transaction.set(doc_ref, aggregate.to_document())
    return aggregate


class FirestoreReadingStore(ReadingStore):
    """Reading store backed by Cloud Firestore"""

    def __init__(self, db=None):
        self.db = db if db is not None else get_db()
        self.articles = FirestoreBaseService(ARTICLES_COLLECTION, db=self.db)
        self.aggregates = FirestoreBaseService(AGGREGATES_COLLECTION, db=self.db)
        self.highlights = FirestoreBaseService(HIGHLIGHTS_COLLECTION, db=self.db)
        self.users = FirestoreBaseService(USERS_COLLECTION, db=self.db)

    @staticmethod
    def _parse(model, data: Dict[str, Any], collection: str):
        try:
            return model.from_document(data["id"], data)
        except ValidationError as e:
            logger.error(f"Malformed document {data.get('id')} in {collection}: {e}")
            raise PersistenceException(
                f"Malformed document in {collection}",
                details={"doc_id": data.get("id"), "error": str(e)}
            )

    # Articles

    async def find_articles_by_owner(self, teacher_id: str) -> List[Article]:
        docs = await self.articles.query([("created_by", "==", teacher_id)])
        articles = [self._parse(Article, doc, ARTICLES_COLLECTION) for doc in docs]
        # Creation order, sorted here to avoid a composite index
        articles.sort(key=lambda a: a.created_at)
        return articles

    async def find_article_by_id(self, article_id: str) -> Optional[Article]:
        doc = await self.articles.find_by_id(article_id)
        if doc is None:
            return None
        return self._parse(Article, doc, ARTICLES_COLLECTION)

    # Reading aggregates

    async def _resolve_students(self, aggregates: List[ReadingAggregate]) -> List[ReadingAggregate]:
        users = await self.users.get_many(a.student_id for a in aggregates)
        for aggregate in aggregates:
            user = users.get(aggregate.student_id)
            if user is not None:
                aggregate.student = StudentRef.from_document(aggregate.student_id, user)
        return aggregates

    async def _resolve_articles(self, aggregates: List[ReadingAggregate]) -> List[ReadingAggregate]:
        docs = await self.articles.get_many(a.article_id for a in aggregates)
        for aggregate in aggregates:
            doc = docs.get(aggregate.article_id)
            if doc is not None:
                article = self._parse(Article, doc, ARTICLES_COLLECTION)
                aggregate.article = ArticleRef.from_article(article)
        return aggregates

    async def find_aggregates_by_article_ids(self, article_ids: Iterable[str]) -> List[ReadingAggregate]:
        ids = list(dict.fromkeys(article_ids))
        docs: List[Dict[str, Any]] = []
        for chunk in chunked(ids):
            docs.extend(await self.aggregates.query([("article_id", "in", chunk)]))

        aggregates = [self._parse(ReadingAggregate, doc, AGGREGATES_COLLECTION) for doc in docs]
        return await self._resolve_students(aggregates)

    async def find_aggregates_by_student_id(self, student_id: str) -> List[ReadingAggregate]:
        docs = await self.aggregates.query([("student_id", "==", student_id)])
        aggregates = [self._parse(ReadingAggregate, doc, AGGREGATES_COLLECTION) for doc in docs]
        return await self._resolve_articles(aggregates)

    async def find_aggregates_by_article_id(self, article_id: str) -> List[ReadingAggregate]:
        docs = await self.aggregates.query([("article_id", "==", article_id)])
        aggregates = [self._parse(ReadingAggregate, doc, AGGREGATES_COLLECTION) for doc in docs]
        return await self._resolve_students(aggregates)

    async def upsert_aggregate(
        self,
        article_id: str,
        student_id: str,
        duration: int,
        now: datetime,
        session_start: Optional[datetime] = None,
        session_end: Optional[datetime] = None
    ) -> ReadingAggregate:
        doc_ref = self.aggregates.collection.document(ReadingAggregate.pair_key(article_id, student_id))
        try:
            aggregate = await asyncio.to_thread(
                _merge_activity,
                self.db.transaction(),
                doc_ref,
                article_id,
                student_id,
                duration,
                now,
                session_start,
                session_end
            )
        except Exception as e:
            logger.error(f"Error upserting aggregate {doc_ref.id}: {str(e)}")
            raise PersistenceException(
                "Failed to record reading activity",
                details={"article_id": article_id, "student_id": student_id, "error": str(e)}
            )

        logger.info(f"Upserted aggregate {aggregate.id} (views={aggregate.views})")
        return aggregate

    # Highlights

    async def create_highlight(self, highlight: Highlight) -> Highlight:
        doc = await self.highlights.create(highlight.to_document())
        return Highlight.from_document(doc["id"], doc)

    async def find_highlights(
        self,
        student_id: str,
        article_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Highlight]:
        filters = [("student_id", "==", student_id)]
        if article_id:
            filters.append(("article_id", "==", article_id))

        docs = await self.highlights.query(filters)
        highlights = [self._parse(Highlight, doc, HIGHLIGHTS_COLLECTION) for doc in docs]
        highlights.sort(key=lambda h: h.created_at, reverse=True)
        return highlights[:limit] if limit else highlights

    async def find_highlight(self, highlight_id: str, student_id: str) -> Optional[Highlight]:
        doc = await self.highlights.find_by_id(highlight_id)
        if doc is None or doc.get("student_id") != student_id:
            return None
        return self._parse(Highlight, doc, HIGHLIGHTS_COLLECTION)

    async def update_highlight_note(self, highlight_id: str, note: Optional[str]) -> Highlight:
        doc = await self.highlights.update(highlight_id, {"note": note})
        return self._parse(Highlight, doc, HIGHLIGHTS_COLLECTION)

    async def delete_highlight(self, highlight_id: str) -> None:
        await self.highlights.delete(highlight_id)
