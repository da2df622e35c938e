"""TailGrid: an in-memory data grid engine with natural-language queries."""

from tailgrid.engine import (
    ColumnDef,
    ColumnFilter,
    DataType,
    FilterOperator,
    GridEngine,
    GridOptions,
    SortSpec,
)

__version__ = "0.1.0"

__all__ = [
    "GridEngine",
    "GridOptions",
    "ColumnDef",
    "ColumnFilter",
    "DataType",
    "FilterOperator",
    "SortSpec",
    "__version__",
]
