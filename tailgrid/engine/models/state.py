"""Grid state, options, and action models.

GridState is immutable: the reducer produces a new instance for every applied
action via model_copy(update=...). Row objects themselves are shared between
states and never copied or mutated by the engine.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from tailgrid.engine.models.column import ColumnDef
from tailgrid.engine.models.filter import ColumnFilter, SortSpec

DEFAULT_PAGE_SIZE = 10

RowIdGetter = Callable[[Any, int], str]


def default_row_id(row: Any, index: int) -> str:
    """Positional row identity: the row's index in the full data set."""
    return str(index)


class PaginationState(BaseModel):
    """Current page position (0-based) and page size."""

    model_config = ConfigDict(frozen=True)

    page_index: int = Field(default=0, ge=0)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)


class PaginationInfo(PaginationState):
    """Pagination state plus metadata derived from the filtered+sorted rows."""

    page_count: int
    total_rows: int
    can_previous_page: bool
    can_next_page: bool


class FeatureFlags(BaseModel):
    """Grid feature switches."""

    model_config = ConfigDict(frozen=True)

    enable_sorting: bool = True
    enable_filtering: bool = True
    enable_pagination: bool = False
    enable_row_selection: bool = False
    enable_multi_row_selection: bool = True


class GridOptions(FeatureFlags):
    """Construction options for a grid: data, columns, initial state, flags."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: list[Any] = Field(default_factory=list)
    columns: list[ColumnDef] = Field(default_factory=list)

    initial_sorting: list[SortSpec] = Field(default_factory=list)
    initial_column_filters: list[ColumnFilter] = Field(default_factory=list)
    initial_global_filter: str = ""
    initial_pagination: PaginationState = Field(default_factory=PaginationState)
    initial_row_selection: dict[str, bool] = Field(default_factory=dict)

    get_row_id: RowIdGetter | None = None


class GridState(FeatureFlags):
    """Complete snapshot of one grid's state.

    Attributes:
        data: Full row set in insertion order.
        columns: Column definitions.
        sorting: Ordered sort keys; first entry is the primary key.
        column_filters: Active column filters, at most one per column id.
        global_filter: Free-text term matched across filterable columns.
        pagination: Current page position.
        row_selection: Selected row ids. Only True entries are stored.
        column_sizing: Current pixel width per column id.
        resizing_column_id: Column currently being resized, if any.
        get_row_id: Row identity function (row, index) -> str.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: list[Any] = Field(default_factory=list)
    columns: list[ColumnDef] = Field(default_factory=list)
    sorting: list[SortSpec] = Field(default_factory=list)
    column_filters: list[ColumnFilter] = Field(default_factory=list)
    global_filter: str = ""
    pagination: PaginationState = Field(default_factory=PaginationState)
    row_selection: dict[str, bool] = Field(default_factory=dict)
    column_sizing: dict[str, float] = Field(default_factory=dict)
    resizing_column_id: str | None = None
    get_row_id: RowIdGetter = default_row_id

    def column(self, column_id: str) -> ColumnDef | None:
        """Look up a column definition by id."""
        for col in self.columns:
            if col.id == column_id:
                return col
        return None


class GridAction(BaseModel):
    """A single state transition request: dotted type name plus payload."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: str
    payload: dict[str, Any] = Field(default_factory=dict)


class ReduceResult(BaseModel):
    """Outcome of applying one action.

    A rejected action returns the input state unchanged with applied=False
    and an error message. Reference errors also carry the registry code and
    the id that could not be resolved in `target_id`.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    state: GridState
    applied: bool = True
    error: str | None = None
    error_code: str | None = None
    target_id: str | None = None
