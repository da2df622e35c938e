"""In-memory grid engine: filter → sort → paginate, selection and sizing.

The engine is a pure reducer over an immutable GridState with a method
facade (GridEngine) for ergonomic call sites.
"""

from tailgrid.engine.grid_engine import GridEngine
from tailgrid.engine.models import (
    ColumnDef,
    ColumnFilter,
    DataType,
    FilterOperator,
    GridAction,
    GridCell,
    GridColumn,
    GridOptions,
    GridRow,
    GridState,
    PaginationInfo,
    PaginationState,
    ReduceResult,
    SortSpec,
)
from tailgrid.engine.reducer import initial_state, reduce, replay

__all__ = [
    # Facade
    "GridEngine",
    # Reducer
    "initial_state",
    "reduce",
    "replay",
    # Models
    "ColumnDef",
    "ColumnFilter",
    "DataType",
    "FilterOperator",
    "GridAction",
    "GridCell",
    "GridColumn",
    "GridOptions",
    "GridRow",
    "GridState",
    "PaginationInfo",
    "PaginationState",
    "ReduceResult",
    "SortSpec",
]
