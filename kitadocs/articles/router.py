"""
Article Router - Public reading endpoints, authoring for doctors and
like/bookmark interactions for users.
"""
from typing import List, Optional, Union
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..admins.models import Admin
from ..doctors.models import Doctor
from ..users.models import User
from ..core.dependencies import get_current_user, get_current_verified_doctor, get_current_doctor_or_admin
from ..core.pagination import PageParams, PageResponse, page_params, paginate
from ..core.schemas import MessageResponse
from ..core.storage import get_storage
from .models import ArticleCategory
from .schemas import ArticleResponse, ArticleUpdate, LikeStatusResponse, BookmarkStatusResponse
from . import service

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/articles", tags=["Articles"])


@router.get("", response_model=List[ArticleResponse])
async def latest_articles(db: Session = Depends(get_db)):
    """The ten most recent articles"""
    return service.get_latest_articles(db)


@router.get("/all", response_model=PageResponse[ArticleResponse])
async def all_articles(params: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    """Every article, newest first, one page at a time"""
    return paginate(service.all_articles_query(db), params, ArticleResponse)


@router.get("/search", response_model=List[ArticleResponse])
async def search(query: Optional[str] = Query(None, description="Text to match"), db: Session = Depends(get_db)):
    """
    Search articles by title, content or author name.

    Raises:
        ValidationException: Blank query (400)
    """
    return service.search_articles(db, query)


@router.get("/category/{category}", response_model=List[ArticleResponse])
async def by_category(category: ArticleCategory, db: Session = Depends(get_db)):
    return service.get_articles_by_category(db, category)


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(article_id: int, db: Session = Depends(get_db)):
    """Get an article with like and bookmark counts"""
    return service.get_article(db, article_id)


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    title: str = Form(...),
    content: str = Form(...),
    category: ArticleCategory = Form(...),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_verified_doctor),
    storage=Depends(get_storage)
):
    """
    Publish an article as a verified doctor.

    The optional image must be image/* and at most 10MB.
    """
    article = await service.create_article(db, storage, current_doctor, title, content, category, image)
    return service.get_article(db, article.id)


@router.put("/{article_id}", response_model=ArticleResponse)
async def edit_article(
    article_id: int,
    data: ArticleUpdate,
    db: Session = Depends(get_db),
    account: Union[Doctor, Admin] = Depends(get_current_doctor_or_admin)
):
    return service.update_article(db, article_id, account, data)


@router.delete("/{article_id}", response_model=MessageResponse)
async def remove_article(
    article_id: int,
    db: Session = Depends(get_db),
    account: Union[Doctor, Admin] = Depends(get_current_doctor_or_admin),
    storage=Depends(get_storage)
):
    service.delete_article(db, storage, article_id, account)
    return {"message": "Article deleted successfully"}


@router.post("/{article_id}/like", response_model=MessageResponse)
async def like(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """
    Raises:
        NotFoundException: Article not found (404)
        AlreadyExistsException: Already liked (409)
    """
    service.like_article(db, article_id, current_user.id)
    return {"message": "Article liked successfully"}


@router.post("/{article_id}/unlike", response_model=MessageResponse)
async def unlike(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    service.unlike_article(db, article_id, current_user.id)
    return {"message": "Article unliked successfully"}


@router.get("/{article_id}/like-status", response_model=LikeStatusResponse)
async def like_status(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"liked": service.is_liked(db, article_id, current_user.id)}


@router.post("/{article_id}/bookmark", response_model=MessageResponse)
async def bookmark(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    service.bookmark_article(db, article_id, current_user.id)
    return {"message": "Article bookmarked successfully"}


@router.post("/{article_id}/unbookmark", response_model=MessageResponse)
async def unbookmark(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    service.unbookmark_article(db, article_id, current_user.id)
    return {"message": "Bookmark removed successfully"}


@router.get("/{article_id}/bookmark-status", response_model=BookmarkStatusResponse)
async def bookmark_status(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"bookmarked": service.is_bookmarked(db, article_id, current_user.id)}
