"""
Offset pagination for the catalog listings.

Listings take ``page``/``pageSize`` and answer with the page items plus a
``pagination`` block in the same camelCase style as the rest of the API.
"""

from typing import Generic, TypeVar, List
from pydantic import Field

from .base import BaseSchema

T = TypeVar('T')

MAX_PAGE_SIZE = 1000


class PaginationParams(BaseSchema):
    """Requested page; converts to OFFSET/LIMIT."""
    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1, le=MAX_PAGE_SIZE, alias="pageSize")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


class PageInfo(BaseSchema):
    """Where a page sits in the full result set."""
    page: int
    page_size: int = Field(alias="pageSize")
    total_items: int = Field(alias="totalItems")
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_previous: bool = Field(alias="hasPrevious")

    @classmethod
    def for_page(cls, params: PaginationParams, total_items: int) -> "PageInfo":
        total_pages = -(-total_items // params.page_size)
        return cls(
            page=params.page,
            page_size=params.page_size,
            total_items=total_items,
            total_pages=total_pages,
            has_next=params.page < total_pages,
            has_previous=params.page > 1
        )


class PaginatedResponse(BaseSchema, Generic[T]):
    """One page of a listing."""
    items: List[T]
    pagination: PageInfo

    @classmethod
    def create(cls, items: List[T], params: PaginationParams, total_items: int) -> "PaginatedResponse[T]":
        return cls(items=items, pagination=PageInfo.for_page(params, total_items))
