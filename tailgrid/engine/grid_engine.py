"""Method facade over the grid reducer.

GridEngine holds the current GridState and turns each setter call into a
GridAction dispatched through reduce(). Getters compute the filtered → sorted
→ paginated view from the current state on every call; nothing is cached.

Example:
    engine = GridEngine(GridOptions(data=rows, columns=columns, enable_pagination=True))
    engine.toggle_sort("age")
    engine.set_column_filter_with_operator(
        ColumnFilter(id="age", operator="gt", value=25)
    )
    page = engine.get_row_model()
"""

import logging
from typing import Any

from tailgrid.engine import reducer
from tailgrid.engine import selection as selection_ops
from tailgrid.engine import sizing as sizing_ops
from tailgrid.engine.accessor import get_row_value
from tailgrid.engine.models import (
    DEFAULT_COLUMN_WIDTH,
    ColumnDef,
    ColumnFilter,
    GridAction,
    GridColumn,
    GridOptions,
    GridRow,
    GridState,
    PaginationInfo,
    PaginationState,
    ReduceResult,
    SortSpec,
)
from tailgrid.engine.processors import get_pagination_info, page_count, paginate_rows
from tailgrid.errors.domain import GridReferenceError

logger = logging.getLogger(__name__)

_REFERENCE_CODES = {"E-1001": "column", "E-1002": "row"}


class GridEngine:
    """Stateful grid over an immutable, reducer-driven state.

    Setters referencing unknown columns or rows are no-ops. With strict=True
    they raise GridReferenceError instead.

    Attributes:
        strict: Raise on unknown column/row references.
        last_result: ReduceResult of the most recent dispatch.
    """

    def __init__(self, options: GridOptions | None = None, strict: bool = False) -> None:
        self._state = reducer.initial_state(options)
        self.strict = strict
        self.last_result: ReduceResult | None = None

    # ============================================
    # DISPATCH
    # ============================================

    def dispatch(self, action: GridAction) -> ReduceResult:
        """Apply one action and keep the resulting state if it was applied."""
        result = reducer.reduce(self._state, action)
        self.last_result = result
        if result.applied:
            self._state = result.state
            return result

        kind = _REFERENCE_CODES.get(result.error_code or "")
        if kind and self.strict:
            raise GridReferenceError(result.error_code, kind, result.target_id or "")
        logger.debug("Ignored %s: %s", action.type, result.error)
        return result

    def _dispatch(self, action_type: str, **payload: Any) -> ReduceResult:
        return self.dispatch(GridAction(type=action_type, payload=payload))

    # ============================================
    # ROW PIPELINE
    # ============================================

    def get_filtered_rows(self) -> list[Any]:
        """Rows passing the global filter and every column filter."""
        return reducer.filtered_rows(self._state)

    def get_sorted_rows(self) -> list[Any]:
        """Filtered rows ordered by the current sorting."""
        return reducer.visible_rows(self._state)

    def get_paginated_rows(self) -> list[Any]:
        """Current page of the sorted rows, or all of them when pagination is off."""
        rows = self.get_sorted_rows()
        if self._state.enable_pagination:
            return paginate_rows(rows, self._state.pagination)
        return rows

    def get_row_model(self) -> list[GridRow]:
        """Row view-models for the current page."""
        state = self._state
        rows = self.get_paginated_rows()
        ids = reducer.row_ids(state, rows)
        return [
            GridRow(
                id=row_id,
                index=index,
                original=row,
                is_selected=bool(state.row_selection.get(row_id)),
                can_select=state.enable_row_selection,
                columns=state.columns,
            )
            for index, (row, row_id) in enumerate(zip(rows, ids))
        ]

    def get_columns(self) -> list[GridColumn]:
        """Column view-models carrying current sort and sizing state."""
        state = self._state
        sort_by_id = {s.id: s for s in state.sorting}
        columns = []
        for col in state.columns:
            spec = sort_by_id.get(col.id)
            columns.append(
                GridColumn(
                    id=col.id,
                    column_def=col,
                    can_sort=reducer.can_sort(state, col),
                    is_sorted=("desc" if spec.desc else "asc") if spec else False,
                    size=sizing_ops.get_size(state.column_sizing, col),
                    is_resizing=state.resizing_column_id == col.id,
                )
            )
        return columns

    # ============================================
    # SORTING
    # ============================================

    def get_sorting(self) -> list[SortSpec]:
        return list(self._state.sorting)

    def set_sorting(self, sorting: list[SortSpec | dict]) -> None:
        self._dispatch("sorting.set", sorting=sorting)

    def toggle_sort(self, column_id: str, multi: bool = False) -> None:
        """Cycle a column through unsorted → asc → desc → unsorted."""
        self._dispatch("sorting.toggle", column_id=column_id, multi=multi)

    def clear_sorting(self) -> None:
        self._dispatch("sorting.clear")

    # ============================================
    # FILTERING
    # ============================================

    def get_column_filters(self) -> list[ColumnFilter]:
        return list(self._state.column_filters)

    def set_column_filter(self, column_id: str, value: Any) -> None:
        """Set a `contains` filter value; None or "" removes the filter."""
        self._dispatch("filter.set", column_id=column_id, value=value)

    def set_column_filter_with_operator(self, column_filter: ColumnFilter | dict) -> None:
        """Add or replace the filter for `column_filter.id`."""
        self._dispatch("filter.set_with_operator", filter=column_filter)

    def remove_column_filter(self, column_id: str) -> None:
        self._dispatch("filter.remove", column_id=column_id)

    def get_global_filter(self) -> str:
        return self._state.global_filter

    def set_global_filter(self, value: str) -> None:
        self._dispatch("filter.set_global", value=value)

    def clear_filters(self) -> None:
        """Remove every column filter and the global filter."""
        self._dispatch("filter.clear")

    # ============================================
    # PAGINATION
    # ============================================

    def get_pagination(self) -> PaginationState:
        return self._state.pagination

    def get_pagination_info(self) -> PaginationInfo:
        """Page metadata measured on the filtered+sorted rows."""
        return get_pagination_info(len(self.get_sorted_rows()), self._state.pagination)

    def set_page_index(self, index: int) -> None:
        """Move to `index`, clamped into [0, page_count - 1]."""
        self._dispatch("page.set_index", page_index=index)

    def set_page_size(self, size: int) -> None:
        """Change the page size and return to the first page."""
        self._dispatch("page.set_size", page_size=size)

    def next_page(self) -> None:
        info = self.get_pagination_info()
        if info.can_next_page:
            self.set_page_index(info.page_index + 1)

    def previous_page(self) -> None:
        info = self.get_pagination_info()
        if info.can_previous_page:
            self.set_page_index(info.page_index - 1)

    def first_page(self) -> None:
        self.set_page_index(0)

    def last_page(self) -> None:
        pagination = self._state.pagination
        count = page_count(len(self.get_sorted_rows()), pagination.page_size)
        self.set_page_index(max(0, count - 1))

    # ============================================
    # SELECTION
    # ============================================

    def get_row_selection(self) -> dict[str, bool]:
        return dict(self._state.row_selection)

    def set_row_selection(self, selection: dict[str, bool]) -> None:
        self._dispatch("selection.set", selection=selection)

    def toggle_row_selection(self, row_id: str) -> None:
        self._dispatch("selection.toggle_row", row_id=row_id)

    def toggle_all_rows_selection(self) -> None:
        """Select every visible row, or clear them if all are already selected."""
        self._dispatch("selection.toggle_all")

    def clear_selection(self) -> None:
        self._dispatch("selection.clear")

    def _visible_ids(self) -> list[str]:
        return reducer.row_ids(self._state, self.get_sorted_rows())

    def get_is_all_rows_selected(self) -> bool:
        return selection_ops.all_selected(self._state.row_selection, self._visible_ids())

    def get_is_some_rows_selected(self) -> bool:
        return selection_ops.some_selected(self._state.row_selection, self._visible_ids())

    def get_selected_rows(self) -> list[Any]:
        """Selected rows in the current filtered+sorted view."""
        rows = self.get_sorted_rows()
        selection = self._state.row_selection
        ids = reducer.row_ids(self._state, rows)
        return [row for row, row_id in zip(rows, ids) if selection.get(row_id)]

    # ============================================
    # COLUMN SIZING
    # ============================================

    def get_column_sizing(self) -> dict[str, float]:
        return dict(self._state.column_sizing)

    def get_column_size(self, column_id: str) -> float:
        """Stored width, else declared width, else 150. Unknown ids get 150."""
        column = self._state.column(column_id)
        if column is None:
            return self._state.column_sizing.get(column_id, DEFAULT_COLUMN_WIDTH)
        return sizing_ops.get_size(self._state.column_sizing, column)

    def set_column_size(self, column_id: str, size: float) -> None:
        """Store a width clamped into the column's bounds."""
        self._dispatch("sizing.set", column_id=column_id, size=size)

    def reset_column_size(self, column_id: str) -> None:
        self._dispatch("sizing.reset", column_id=column_id)

    def get_resizing_column_id(self) -> str | None:
        return self._state.resizing_column_id

    def set_resizing_column_id(self, column_id: str | None) -> None:
        self._dispatch("sizing.set_resizing", column_id=column_id)

    # ============================================
    # STATE UPDATES
    # ============================================

    def set_data(self, data: list[Any]) -> None:
        self._dispatch("data.set", data=data)

    def set_columns(self, columns: list[ColumnDef]) -> None:
        self._dispatch("columns.set", columns=columns)

    def set_options(self, **flags: bool) -> None:
        """Replace the feature flags. Flags not passed revert to their defaults."""
        self._dispatch("options.set", **flags)

    def get_state(self) -> GridState:
        """The current immutable state snapshot."""
        return self._state

    # ============================================
    # DATA ACCESS
    # ============================================

    def get_all_rows(self) -> list[Any]:
        return list(self._state.data)

    def get_row_by_id(self, row_id: str) -> Any | None:
        index = reducer.find_row_index(self._state, row_id)
        return None if index is None else self._state.data[index]

    def get_row_by_index(self, index: int) -> Any | None:
        """Row at `index` in the filtered+sorted view."""
        rows = self.get_sorted_rows()
        if 0 <= index < len(rows):
            return rows[index]
        return None

    def get_cell_value(self, row_id: str, column_id: str) -> Any | None:
        row = self.get_row_by_id(row_id)
        column = self._state.column(column_id)
        if row is None or column is None:
            return None
        return get_row_value(row, column)

    def set_cell_value(self, row_id: str, column_id: str, value: Any) -> None:
        """Write through the column's accessor key, replacing the row."""
        self._dispatch("data.set_cell", row_id=row_id, column_id=column_id, value=value)

    def update_row(self, row_id: str, updates: dict[str, Any]) -> None:
        """Replace the row with a copy carrying `updates`."""
        self._dispatch("data.update_row", row_id=row_id, updates=updates)

    def add_row(self, row: Any) -> None:
        self._dispatch("data.add_row", row=row)

    def remove_row(self, row_id: str) -> None:
        self._dispatch("data.remove_row", row_id=row_id)

    def get_column_ids(self) -> list[str]:
        return [col.id for col in self._state.columns]

    def get_column_by_id(self, column_id: str) -> ColumnDef | None:
        return self._state.column(column_id)

    def get_column_values(self, column_id: str) -> list[Any]:
        """Values of one column over the filtered+sorted view; [] for unknown ids."""
        column = self._state.column(column_id)
        if column is None:
            return []
        return [get_row_value(row, column) for row in self.get_sorted_rows()]
