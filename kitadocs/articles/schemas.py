"""
Article Schemas - Pydantic models for article data validation and serialization.
"""
from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime
from .models import ArticleCategory


class ArticleAuthor(BaseModel):
    """Public view of an article's doctor"""
    id: int
    full_name: str
    specialization: List[str] = []

    class Config:
        from_attributes = True


class ArticleUpdate(BaseModel):
    """
    Article Update Schema - Fields an author or admin may change

    All fields are optional; only provided fields are updated.
    """
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    category: Optional[ArticleCategory] = None


class ArticleResponse(BaseModel):
    """
    Article Response Schema - Used when returning article data

    Fields:
    - id: Article ID
    - title / content / category / image_url: Article data
    - doctor: Author summary
    - like_count / bookmark_count: Interaction totals
    """
    id: int
    title: str
    content: str
    image_url: Optional[str] = None
    category: ArticleCategory
    doctor_id: int
    doctor: Optional[ArticleAuthor] = None
    like_count: int = 0
    bookmark_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LikeStatusResponse(BaseModel):
    liked: bool


class BookmarkStatusResponse(BaseModel):
    bookmarked: bool
