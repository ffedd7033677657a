"""Pagination – limit/offset helpers and the page envelope."""
from sqrepo.pagination.page import (
    DEFAULT_PAGE_SIZE,
    PageEnvelope,
    Pagination,
    get_pagination,
    get_paging_data,
)

__all__ = ["DEFAULT_PAGE_SIZE", "PageEnvelope", "Pagination", "get_pagination", "get_paging_data"]
