"""
Article Service - Business logic for articles, likes and bookmarks.

Likes and bookmarks rely on the (article_id, user_id) unique constraints:
adding inserts and lets the database reject duplicates, removing is a single
DELETE whose row count tells whether anything was there.
"""
import logging
from typing import List, Optional, Union

from fastapi import UploadFile
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from starlette.concurrency import run_in_threadpool

from ..admins.models import Admin
from ..core.storage import read_upload, validate_image, discard_uploads
from ..doctors.models import Doctor
from ..exceptions import (
    NotFoundException, AlreadyExistsException, InvalidStateException, PermissionDeniedException, ValidationException
)
from .models import Article, ArticleCategory, ArticleLike, ArticleBookmark
from .schemas import ArticleUpdate

# Set up logging
logger = logging.getLogger(__name__)

LATEST_ARTICLES_LIMIT = 10


def articles_query(db: Session):
    """Base query loading everything the article response needs"""
    return db.query(Article).options(
        selectinload(Article.doctor),
        selectinload(Article.likes),
        selectinload(Article.bookmarks),
    )


async def create_article(
    db: Session,
    storage,
    doctor: Doctor,
    title: str,
    content: str,
    category: ArticleCategory,
    image: Optional[UploadFile] = None
) -> Article:
    """
    Publish an article, uploading the optional cover image first.

    Raises:
        ValidationException: Blank title or content, or an invalid image
    """
    title = title.strip()
    content = content.strip()
    if not title or not content:
        raise ValidationException("Title, content and category are required")

    stored = None
    if image is not None and image.filename:
        validate_image(image)
        data = await read_upload(image)
        stored = await run_in_threadpool(storage.upload, data, "article-image", image.filename, image.content_type)

    article = Article(
        title=title,
        content=content,
        category=category,
        doctor_id=doctor.id,
        image_url=stored.url if stored else None,
        image_public_id=stored.public_id if stored else None
    )
    db.add(article)
    try:
        db.commit()
    except Exception:
        db.rollback()
        if stored:
            discard_uploads(storage, [stored])
        raise
    db.refresh(article)

    logger.info(f"Article {article.id} created by doctor {doctor.id}")
    return article


def get_latest_articles(db: Session, limit: int = LATEST_ARTICLES_LIMIT) -> List[Article]:
    return articles_query(db).order_by(Article.created_at.desc(), Article.id.desc()).limit(limit).all()


def all_articles_query(db: Session):
    return articles_query(db).order_by(Article.created_at.desc(), Article.id.desc())


def get_article(db: Session, article_id: int) -> Article:
    """
    Get an article by ID.

    Raises:
        NotFoundException: If the article does not exist
    """
    article = articles_query(db).filter(Article.id == article_id).first()
    if article is None:
        raise NotFoundException("Article not found")
    return article


def search_articles(db: Session, query: str) -> List[Article]:
    """
    Case-insensitive match on title, content or author name.

    Raises:
        ValidationException: If the query is blank
    """
    query = (query or "").strip()
    if not query:
        raise ValidationException("Search query is required")

    pattern = f"%{query}%"
    return (
        articles_query(db)
        .join(Article.doctor)
        .filter(or_(
            Article.title.ilike(pattern),
            Article.content.ilike(pattern),
            Doctor.full_name.ilike(pattern),
        ))
        .order_by(Article.created_at.desc(), Article.id.desc())
        .all()
    )


def get_articles_by_category(db: Session, category: ArticleCategory) -> List[Article]:
    return (
        articles_query(db)
        .filter(Article.category == category)
        .order_by(Article.created_at.desc(), Article.id.desc())
        .all()
    )


def _check_can_modify(article: Article, account: Union[Doctor, Admin]) -> None:
    if isinstance(account, Admin):
        return
    if article.doctor_id != account.id:
        raise PermissionDeniedException("You can only modify your own articles")


def update_article(db: Session, article_id: int, account: Union[Doctor, Admin], data: ArticleUpdate) -> Article:
    """
    Edit an article's title, content or category.

    Raises:
        NotFoundException: Article not found
        PermissionDeniedException: Caller is neither the author nor an admin
        ValidationException: Title or content is blank once stripped
    """
    article = get_article(db, article_id)
    _check_can_modify(article, account)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field in ("title", "content"):
        if field in changes:
            changes[field] = changes[field].strip()
            if not changes[field]:
                raise ValidationException("Title, content and category are required")

    for field, value in changes.items():
        setattr(article, field, value)

    db.commit()
    db.refresh(article)
    logger.info(f"Article {article.id} updated by {account.__class__.__name__.lower()} {account.id}")
    return article


def delete_article(db: Session, storage, article_id: int, account: Union[Doctor, Admin]) -> None:
    """
    Delete an article and its cover image.

    Raises:
        NotFoundException: Article not found
        PermissionDeniedException: Caller is neither the author nor an admin
    """
    article = get_article(db, article_id)
    _check_can_modify(article, account)

    image_public_id = article.image_public_id
    db.delete(article)
    db.commit()
    logger.info(f"Article {article_id} deleted by {account.__class__.__name__.lower()} {account.id}")

    if image_public_id:
        storage.delete(image_public_id)


def _ensure_article_exists(db: Session, article_id: int) -> None:
    if db.query(Article.id).filter(Article.id == article_id).first() is None:
        raise NotFoundException("Article not found")


def _add_interaction(db: Session, model, article_id: int, user_id: int, duplicate_message: str) -> None:
    _ensure_article_exists(db, article_id)
    db.add(model(article_id=article_id, user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyExistsException(duplicate_message)


def _remove_interaction(db: Session, model, article_id: int, user_id: int, missing_message: str) -> None:
    _ensure_article_exists(db, article_id)
    removed = (
        db.query(model)
        .filter(model.article_id == article_id, model.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if removed == 0:
        raise InvalidStateException(missing_message, status_code=400)


def _has_interaction(db: Session, model, article_id: int, user_id: int) -> bool:
    _ensure_article_exists(db, article_id)
    return db.query(model.id).filter(model.article_id == article_id, model.user_id == user_id).first() is not None


def like_article(db: Session, article_id: int, user_id: int) -> None:
    _add_interaction(db, ArticleLike, article_id, user_id, "Article already liked")
    logger.info(f"User {user_id} liked article {article_id}")


def unlike_article(db: Session, article_id: int, user_id: int) -> None:
    _remove_interaction(db, ArticleLike, article_id, user_id, "Article not liked yet")
    logger.info(f"User {user_id} unliked article {article_id}")


def is_liked(db: Session, article_id: int, user_id: int) -> bool:
    return _has_interaction(db, ArticleLike, article_id, user_id)


def bookmark_article(db: Session, article_id: int, user_id: int) -> None:
    _add_interaction(db, ArticleBookmark, article_id, user_id, "Article already bookmarked")
    logger.info(f"User {user_id} bookmarked article {article_id}")


def unbookmark_article(db: Session, article_id: int, user_id: int) -> None:
    _remove_interaction(db, ArticleBookmark, article_id, user_id, "Article not bookmarked yet")
    logger.info(f"User {user_id} removed bookmark on article {article_id}")


def is_bookmarked(db: Session, article_id: int, user_id: int) -> bool:
    return _has_interaction(db, ArticleBookmark, article_id, user_id)
