"""
Pagination Utilities.

Page-number pagination shared by the note listing procedure and the
REST list endpoint. Pages are 1-based; `total` is always the count of
items after filtering, independent of the requested page.
"""

import math
from dataclasses import dataclass
from typing import Sequence, TypeVar

from fastapi import Query

T = TypeVar("T")

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


# =============================================================================
# Pagination Parameters
# =============================================================================


@dataclass
class PageParams:
    """Page parameters extracted from the query string."""

    page: int
    limit: int

    @property
    def offset(self) -> int:
        """Number of items skipped before this page."""
        return (self.page - 1) * self.limit


def get_page_params(
    page: int = Query(
        default=1,
        ge=1,
        description="Page number (1-based)",
    ),
    limit: int = Query(
        default=DEFAULT_PAGE_LIMIT,
        ge=1,
        le=MAX_PAGE_LIMIT,
        description="Maximum number of items per page",
    ),
) -> PageParams:
    """
    FastAPI dependency for page parameters.

    Usage:
        @router.get("/items")
        async def list_items(
            pagination: PageParams = Depends(get_page_params),
        ):
            ...
    """
    return PageParams(page=page, limit=limit)


# =============================================================================
# Page Math
# =============================================================================


def page_count(total: int, limit: int) -> int:
    """Number of pages needed for `total` items, i.e. ceil(total / limit)."""
    return math.ceil(total / limit)


def paginate(items: Sequence[T], page: int, limit: int) -> list[T]:
    """
    Slice one page out of an already ordered sequence.

    Args:
        items: Filtered, ordered items
        page: 1-based page number
        limit: Page size

    Returns:
        Up to `limit` items starting at (page - 1) * limit
    """
    offset = PageParams(page=page, limit=limit).offset
    return list(items[offset:offset + limit])
