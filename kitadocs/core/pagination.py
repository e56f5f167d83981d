"""
Page-numbered listings for the public article feed.

``page_params`` is the FastAPI dependency reading ``?page=&size=``; ``paginate``
runs an already ordered query for one page and wraps it in ``PageResponse``.
"""
from dataclasses import dataclass
from typing import Generic, List, Type, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy.orm import Query as SQLAlchemyQuery

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


@dataclass(frozen=True)
class PageParams:
    """1-indexed page number and page size"""
    page: int = 1
    size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


def page_params(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Articles per page")
) -> PageParams:
    return PageParams(page=page, size=size)


class PageResponse(BaseModel, Generic[T]):
    """
    One page of results.

    Fields:
    - items: Results on this page, empty past the last page
    - total: Results across all pages
    - page / size: The requested page
    - pages: Number of non-empty pages
    - has_next / has_prev: Whether there are results after / before this page
    """
    items: List[T]
    total: int
    page: int
    size: int
    pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def for_page(cls, items: List[T], total: int, params: PageParams) -> "PageResponse[T]":
        pages = -(-total // params.size)
        return cls(
            items=items,
            total=total,
            page=params.page,
            size=params.size,
            pages=pages,
            has_next=params.page < pages,
            has_prev=params.page > 1 and total > 0
        )


def paginate(query: SQLAlchemyQuery, params: PageParams, schema_class: Type[BaseModel]) -> PageResponse:
    """
    Fetch one page of an ordered query.

    Args:
        query: Query carrying its own ORDER BY
        params: Requested page
        schema_class: Response model each row is validated into

    Returns:
        PageResponse: The page and its totals
    """
    # Counting does not need the ordering
    total = query.order_by(None).count()
    if total == 0 or params.offset >= total:
        return PageResponse.for_page([], total, params)

    rows = query.offset(params.offset).limit(params.size).all()
    return PageResponse.for_page([schema_class.model_validate(row) for row in rows], total, params)
