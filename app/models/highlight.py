"""
Highlight data models
"""
from pydantic import Field, field_validator
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from .base import CamelModel


class Highlight(CamelModel):
    id: Optional[str] = None
    article_id: str
    student_id: str
    text: str = Field(..., min_length=1, max_length=1000)
    note: Optional[str] = Field(default=None, max_length=500)
    position: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"id"})

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Highlight":
        return cls.model_validate({**data, "id": doc_id})


def _clean_note(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class HighlightCreate(CamelModel):
    article_id: str = Field(..., min_length=1)
    text: str
    note: Optional[str] = None
    position: int = 0

    @field_validator("text")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Highlight text cannot be empty")
        if len(value) > 1000:
            raise ValueError("Highlight text cannot exceed 1000 characters")
        return value

    @field_validator("note")
    @classmethod
    def strip_note(cls, value: Optional[str]) -> Optional[str]:
        value = _clean_note(value)
        if value and len(value) > 500:
            raise ValueError("Note cannot exceed 500 characters")
        return value


class HighlightUpdate(CamelModel):
    note: Optional[str] = None

    @field_validator("note")
    @classmethod
    def strip_note(cls, value: Optional[str]) -> Optional[str]:
        value = _clean_note(value)
        if value and len(value) > 500:
            raise ValueError("Note cannot exceed 500 characters")
        return value
