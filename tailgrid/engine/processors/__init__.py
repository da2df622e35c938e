"""Stateless row processors: filter, sort, paginate."""

from tailgrid.engine.processors.filtering import (
    filter_rows,
    global_filter_rows,
    matches_filter,
)
from tailgrid.engine.processors.pagination import (
    clamp_page_index,
    get_pagination_info,
    page_count,
    paginate_rows,
)
from tailgrid.engine.processors.sorting import compare_values, natural_key, sort_rows

__all__ = [
    "filter_rows",
    "global_filter_rows",
    "matches_filter",
    "sort_rows",
    "compare_values",
    "natural_key",
    "paginate_rows",
    "page_count",
    "get_pagination_info",
    "clamp_page_index",
]
