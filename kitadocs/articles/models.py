"""
Article Models - Doctor-authored articles and the reader interactions on them.

Likes and bookmarks are join rows keyed by (article_id, user_id). The pair is
unique at the database level so a duplicate insert fails instead of creating a
second row.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, UniqueConstraint, func
from sqlalchemy.orm import relationship
from ..database import Base


class ArticleCategory(str, enum.Enum):
    """Topic an article is filed under"""
    GENERAL_HEALTH = "GENERAL_HEALTH"
    NUTRITION = "NUTRITION"
    MENTAL_HEALTH = "MENTAL_HEALTH"
    FITNESS = "FITNESS"
    DISEASES = "DISEASES"
    MEDICATIONS = "MEDICATIONS"
    PEDIATRICS = "PEDIATRICS"
    WOMENS_HEALTH = "WOMENS_HEALTH"
    RESEARCH = "RESEARCH"


class Article(Base):
    """
    Article Model - Content published by a verified doctor

    Fields:
    - id: Primary key
    - title / content: Article body
    - image_url: Optional cover image in object storage
    - category: ArticleCategory value
    - doctor_id: Author
    """
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String, nullable=True)
    image_public_id = Column(String, nullable=True)
    category = Column(Enum(ArticleCategory), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    doctor = relationship("Doctor", back_populates="articles")
    likes = relationship("ArticleLike", back_populates="article", cascade="all, delete-orphan")
    bookmarks = relationship("ArticleBookmark", back_populates="article", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Article(id={self.id}, title='{self.title}', doctor_id={self.doctor_id})>"

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def bookmark_count(self) -> int:
        return len(self.bookmarks)


class ArticleLike(Base):
    """A user's like on an article"""
    __tablename__ = "article_likes"
    __table_args__ = (UniqueConstraint("article_id", "user_id", name="uq_article_likes_article_user"),)

    id = Column(Integer, primary_key=True, index=True)
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    article = relationship("Article", back_populates="likes")
    user = relationship("User", back_populates="likes")


class ArticleBookmark(Base):
    """A user's saved article"""
    __tablename__ = "article_bookmarks"
    __table_args__ = (UniqueConstraint("article_id", "user_id", name="uq_article_bookmarks_article_user"),)

    id = Column(Integer, primary_key=True, index=True)
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    article = relationship("Article", back_populates="bookmarks")
    user = relationship("User", back_populates="bookmarks")
