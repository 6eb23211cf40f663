"""Range-header pagination (``206`` + ``Next-Range`` → ``Range``)."""

from heroku_api_core.pagination.fetcher import (
    NEXT_RANGE_HEADER,
    RANGE_HEADER,
    PageHandler,
    PaginationState,
    Paginator,
    fetch_all_pages,
    iter_pages,
)

__all__ = [
    "NEXT_RANGE_HEADER",
    "RANGE_HEADER",
    "PageHandler",
    "PaginationState",
    "Paginator",
    "fetch_all_pages",
    "iter_pages",
]
