"""Pydantic models for the grid engine.

This module exports column definitions, the filter/sort vocabulary,
immutable grid state and actions, and the row/column view-models.
"""

from tailgrid.engine.models.column import (
    DEFAULT_COLUMN_WIDTH,
    DEFAULT_MAX_WIDTH,
    DEFAULT_MIN_WIDTH,
    NUMERIC_TYPES,
    ColumnDef,
    DataType,
    GridColumn,
)
from tailgrid.engine.models.filter import (
    OPERATOR_DESCRIPTIONS,
    ColumnFilter,
    FilterOperator,
    SortingState,
    SortSpec,
    unique_sorting,
)
from tailgrid.engine.models.row import GridCell, GridRow
from tailgrid.engine.models.state import (
    DEFAULT_PAGE_SIZE,
    FeatureFlags,
    GridAction,
    GridOptions,
    GridState,
    PaginationInfo,
    PaginationState,
    ReduceResult,
    default_row_id,
)

__all__ = [
    # Column models
    "ColumnDef",
    "DataType",
    "GridColumn",
    "NUMERIC_TYPES",
    "DEFAULT_COLUMN_WIDTH",
    "DEFAULT_MIN_WIDTH",
    "DEFAULT_MAX_WIDTH",
    # Filter/sort vocabulary
    "ColumnFilter",
    "FilterOperator",
    "OPERATOR_DESCRIPTIONS",
    "SortSpec",
    "SortingState",
    "unique_sorting",
    # Row view-models
    "GridRow",
    "GridCell",
    # State and actions
    "FeatureFlags",
    "GridOptions",
    "GridState",
    "GridAction",
    "ReduceResult",
    "PaginationState",
    "PaginationInfo",
    "DEFAULT_PAGE_SIZE",
    "default_row_id",
]
