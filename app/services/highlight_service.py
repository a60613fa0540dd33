"""
Highlight management service
"""
import logging
from typing import List, Optional

from ..core.config import settings
from ..core.exceptions import AuthenticationException, ResourceNotFoundException
from ..core.identifiers import validate_identifier
from ..models.highlight import Highlight, HighlightCreate
from .stores.base import ReadingStore

logger = logging.getLogger(__name__)


class HighlightService:
    """Service for student highlights on articles"""

    def __init__(self, store: ReadingStore):
        self.store = store

    @staticmethod
    def _require_student(student_id: Optional[str]) -> str:
        if not student_id:
            raise AuthenticationException("Authentication required")
        return student_id

    async def create_highlight(self, student_id: Optional[str], data: HighlightCreate) -> Highlight:
        student_id = self._require_student(student_id)
        validate_identifier(data.article_id, "article ID")

        if await self.store.find_article_by_id(data.article_id) is None:
            raise ResourceNotFoundException("Article not found", details={"article_id": data.article_id})

        highlight = await self.store.create_highlight(Highlight(
            article_id=data.article_id,
            student_id=student_id,
            text=data.text,
            note=data.note,
            position=data.position
        ))
        logger.info(f"Highlight {highlight.id} created on article {data.article_id}")
        return highlight

    async def list_highlights(self, student_id: Optional[str], article_id: Optional[str] = None) -> List[Highlight]:
        student_id = self._require_student(student_id)
        if article_id:
            validate_identifier(article_id, "article ID")
        return await self.store.find_highlights(
            student_id,
            article_id=article_id,
            limit=settings.HIGHLIGHTS_LIST_LIMIT
        )

    async def _owned(self, student_id: Optional[str], highlight_id: str) -> Highlight:
        student_id = self._require_student(student_id)
        validate_identifier(highlight_id, "highlight ID")
        highlight = await self.store.find_highlight(highlight_id, student_id)
        if highlight is None:
            raise ResourceNotFoundException("Highlight not found", details={"highlight_id": highlight_id})
        return highlight

    async def update_highlight_note(self, student_id: Optional[str], highlight_id: str, note: Optional[str]) -> Highlight:
        await self._owned(student_id, highlight_id)
        return await self.store.update_highlight_note(highlight_id, note)

    async def delete_highlight(self, student_id: Optional[str], highlight_id: str) -> None:
        await self._owned(student_id, highlight_id)
        await self.store.delete_highlight(highlight_id)
        logger.info(f"Highlight {highlight_id} deleted")
