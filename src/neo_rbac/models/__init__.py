"""Shared API models."""
from .base import BaseSchema, APIResponse, utc_now
from .pagination import PageInfo, PaginatedResponse, PaginationParams

__all__ = [
    "BaseSchema",
    "APIResponse",
    "utc_now",
    "PageInfo",
    "PaginatedResponse",
    "PaginationParams",
]
