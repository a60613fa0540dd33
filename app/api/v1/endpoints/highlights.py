"""
Highlights management endpoints
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ....core.responses import success_response
from ....models.highlight import HighlightCreate, HighlightUpdate
from ....services.highlight_service import HighlightService
from ....services.stores.base import ReadingStore
from ...deps import get_reading_store
from .auth import get_current_user

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_highlight(
    body: HighlightCreate,
    current_user_id: str = Depends(get_current_user),
    store: ReadingStore = Depends(get_reading_store)
) -> Dict[str, Any]:
    """Save a highlight on an article"""
    highlight = await HighlightService(store).create_highlight(current_user_id, body)
    return success_response(highlight=highlight.to_json())


@router.get("")
async def get_highlights(
    article_id: Optional[str] = Query(default=None, alias="articleId"),
    current_user_id: str = Depends(get_current_user),
    store: ReadingStore = Depends(get_reading_store)
) -> Dict[str, Any]:
    """Caller's highlights, newest first, optionally for one article"""
    highlights = await HighlightService(store).list_highlights(current_user_id, article_id)
    return success_response(highlights=[h.to_json() for h in highlights])


@router.put("/{highlight_id}")
async def update_highlight(
    highlight_id: str,
    body: HighlightUpdate,
    current_user_id: str = Depends(get_current_user),
    store: ReadingStore = Depends(get_reading_store)
) -> Dict[str, Any]:
    """Replace the note on a highlight"""
    highlight = await HighlightService(store).update_highlight_note(current_user_id, highlight_id, body.note)
    return success_response(highlight=highlight.to_json())


@router.delete("/{highlight_id}")
async def delete_highlight(
    highlight_id: str,
    current_user_id: str = Depends(get_current_user),
    store: ReadingStore = Depends(get_reading_store)
) -> Dict[str, Any]:
    """Delete a highlight"""
    await HighlightService(store).delete_highlight(current_user_id, highlight_id)
    return success_response("Highlight deleted successfully")
