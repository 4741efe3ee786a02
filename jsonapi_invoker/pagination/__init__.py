"""Pagination for JSON:API collection responses."""

from .base import PaginationBase
from .standard import StandardPagination

__all__ = ["PaginationBase", "StandardPagination"]
