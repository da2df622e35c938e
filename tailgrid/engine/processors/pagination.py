"""Page slicing and page metadata."""

from __future__ import annotations

import math
from typing import Any, Sequence

from tailgrid.engine.models.state import PaginationInfo, PaginationState


def paginate_rows(rows: Sequence[Any], pagination: PaginationState) -> list[Any]:
    """Return the rows on the current page."""
    start = pagination.page_index * pagination.page_size
    return list(rows[start : start + pagination.page_size])


def page_count(total_rows: int, page_size: int) -> int:
    """Number of pages needed for `total_rows`."""
    return math.ceil(total_rows / page_size)


def get_pagination_info(total_rows: int, pagination: PaginationState) -> PaginationInfo:
    """Derive page metadata.

    Args:
        total_rows: Row count of the filtered+sorted view, never the raw data.
        pagination: Current page position.
    """
    count = page_count(total_rows, pagination.page_size)
    return PaginationInfo(
        page_index=pagination.page_index,
        page_size=pagination.page_size,
        page_count=count,
        total_rows=total_rows,
        can_previous_page=pagination.page_index > 0,
        can_next_page=pagination.page_index < count - 1,
    )


def clamp_page_index(index: int, total_rows: int, page_size: int) -> int:
    """Clamp `index` into [0, page_count - 1]; 0 when there are no pages."""
    last = page_count(total_rows, page_size) - 1
    return max(0, min(index, last))
