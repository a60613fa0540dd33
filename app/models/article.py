"""
Article data models
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from enum import Enum


class ArticleCategory(str, Enum):
    science = "Science"
    math = "Math"
    english = "English"
    history = "History"
    geography = "Geography"
    computer_science = "Computer Science"
    arts = "Arts"
    other = "Other"


class BlockType(str, Enum):
    text = "text"
    three_d = "3d"
    image = "image"
    video = "video"


class ContentBlock(BaseModel):
    type: BlockType
    content: str
    order: int


class Article(BaseModel):
    id: str
    title: str
    category: ArticleCategory
    content_blocks: List[ContentBlock] = []
    created_by: str  # owning teacher id
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Article":
        return cls(**{**data, "id": doc_id})


class ArticleRef(BaseModel):
    """Title/category projection of an article, resolved onto aggregates"""
    id: str
    title: str
    category: str
    created_by: Optional[str] = None

    @classmethod
    def from_article(cls, article: Article) -> "ArticleRef":
        return cls(
            id=article.id,
            title=article.title,
            category=article.category.value,
            created_by=article.created_by
        )
