"""
TailGrid Engine — Reducer

Pure function: (state, action) → ReduceResult
No side effects. No IO. Deterministic.

GridState is a frozen pydantic model, so every applied action produces a new
state through model_copy(update=...) and the input state is never modified.
Rows themselves are shared between states; actions that edit a row rebuild
the data list and replace only the edited row.

Rejected actions return the input state with applied=False. References to
unknown columns and rows carry registry codes E-1001 / E-1002 so a strict
caller can turn them into GridReferenceError.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Mapping
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from tailgrid.engine import selection as selection_ops
from tailgrid.engine import sizing as sizing_ops
from tailgrid.engine.models import (
    ColumnDef,
    ColumnFilter,
    FeatureFlags,
    GridAction,
    GridOptions,
    GridState,
    PaginationState,
    ReduceResult,
    SortSpec,
    default_row_id,
    unique_sorting,
)
from tailgrid.engine.processors import (
    clamp_page_index,
    filter_rows,
    global_filter_rows,
    sort_rows,
)
from tailgrid.errors.registry import render_message

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def initial_state(options: GridOptions | None = None) -> GridState:
    """Build the starting state for a grid from its construction options."""
    options = options or GridOptions()
    multi = options.enable_multi_row_selection
    return GridState(
        data=list(options.data),
        columns=list(options.columns),
        sorting=unique_sorting(list(options.initial_sorting)),
        column_filters=list(options.initial_column_filters),
        global_filter=options.initial_global_filter,
        pagination=options.initial_pagination,
        row_selection=selection_ops.normalize_selection(options.initial_row_selection, multi),
        column_sizing=sizing_ops.initial_sizing(options.columns),
        resizing_column_id=None,
        get_row_id=options.get_row_id or default_row_id,
        enable_sorting=options.enable_sorting,
        enable_filtering=options.enable_filtering,
        enable_pagination=options.enable_pagination,
        enable_row_selection=options.enable_row_selection,
        enable_multi_row_selection=multi,
    )


def reduce(state: GridState, action: GridAction) -> ReduceResult:
    """
    Apply one action to the current state.
    Returns new state + applied flag + error.

    Malformed payloads (missing keys, values that fail model validation)
    are rejected rather than raised.
    """
    handler = _HANDLERS.get(action.type)
    if handler is None:
        return ReduceResult(
            state=state,
            applied=False,
            error=f"UNKNOWN_ACTION: {action.type}",
        )

    try:
        return handler(state, action.payload)
    except (KeyError, TypeError, ValueError, ValidationError) as e:
        logger.warning("Rejected %s action with invalid payload: %s", action.type, e)
        return _reject(state, f"INVALID_PAYLOAD: {e}")


def replay(options: GridOptions | None, actions: list[GridAction]) -> GridState:
    """
    Rebuild state from scratch by reducing over all actions.
    replay(o, [a1, a2]) == reduce(reduce(initial_state(o), a1), a2).state
    """
    state = initial_state(options)
    for action in actions:
        result = reduce(state, action)
        if result.applied:
            state = result.state
    return state


def filtered_rows(state: GridState) -> list[Any]:
    """Global filter, then column filters, over the full row set."""
    rows = list(state.data)
    if not state.enable_filtering:
        return rows
    if state.global_filter:
        rows = global_filter_rows(rows, state.global_filter, state.columns)
    if state.column_filters:
        rows = filter_rows(rows, state.column_filters, state.columns)
    return rows


def visible_rows(state: GridState) -> list[Any]:
    """The filtered+sorted view, before pagination."""
    rows = filtered_rows(state)
    if state.sorting:
        rows = sort_rows(rows, state.sorting, state.columns)
    return rows


def row_ids(state: GridState, rows: list[Any]) -> list[str]:
    """Ids for `rows`, computed from each row's position in the full data set."""
    positions: dict[int, int] = {}
    for index, row in enumerate(state.data):
        positions.setdefault(id(row), index)
    return [state.get_row_id(row, positions.get(id(row), -1)) for row in rows]


def find_row_index(state: GridState, row_id: str) -> int | None:
    """Position in the full data set of the row with `row_id`, or None."""
    for index, row in enumerate(state.data):
        if state.get_row_id(row, index) == row_id:
            return index
    return None


def can_sort(state: GridState, column: ColumnDef) -> bool:
    """A column's own flag wins over the grid-wide sorting flag."""
    if column.enable_sorting is not None:
        return column.enable_sorting
    return state.enable_sorting


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _reject(
    state: GridState,
    message: str,
    code: str | None = None,
    target_id: str | None = None,
) -> ReduceResult:
    return ReduceResult(
        state=state,
        applied=False,
        error=message,
        error_code=code,
        target_id=target_id,
    )


def _ok(state: GridState, **update: Any) -> ReduceResult:
    return ReduceResult(state=state.model_copy(update=update))


def _unknown_column(state: GridState, column_id: str) -> ReduceResult:
    return _reject(state, render_message("E-1001", column=column_id), "E-1001", column_id)


def _unknown_row(state: GridState, row_id: str) -> ReduceResult:
    return _reject(state, render_message("E-1002", row_id=row_id), "E-1002", row_id)


def _merge_row(row: Any, updates: Mapping[str, Any]) -> Any:
    """Return a copy of `row` with `updates` applied; the original is untouched."""
    if isinstance(row, Mapping):
        return {**row, **updates}
    if isinstance(row, BaseModel):
        return row.model_copy(update=dict(updates))
    if dataclasses.is_dataclass(row) and not isinstance(row, type):
        return dataclasses.replace(row, **updates)
    clone = copy.copy(row)
    for key, value in updates.items():
        setattr(clone, key, value)
    return clone


def _replace_row(state: GridState, index: int, row: Any) -> list[Any]:
    data = list(state.data)
    data[index] = row
    return data


def _clamped_pagination(state: GridState, page_index: int) -> PaginationState:
    total = len(visible_rows(state))
    size = state.pagination.page_size
    return PaginationState(page_index=clamp_page_index(page_index, total, size), page_size=size)


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


def _handle_sorting_set(state: GridState, payload: dict) -> ReduceResult:
    """Replace the sort; a repeated column id keeps its first entry."""
    sorting = [SortSpec.model_validate(s) for s in payload.get("sorting") or []]
    return _ok(state, sorting=unique_sorting(sorting))


def _handle_sorting_toggle(state: GridState, payload: dict) -> ReduceResult:
    """
    Cycle one column: unsorted → asc → desc → unsorted.

    multi=False replaces the whole sort with this column's next state.
    multi=True updates the column in place, appends it, or removes it,
    leaving the other keys alone.
    """
    column_id = payload["column_id"]
    multi = bool(payload.get("multi", False))

    column = state.column(column_id)
    if column is None:
        return _unknown_column(state, column_id)
    if not can_sort(state, column):
        return _reject(state, render_message("E-1004", column=column_id), "E-1004", column_id)

    existing = next((s for s in state.sorting if s.id == column_id), None)
    if existing is None:
        next_spec: SortSpec | None = SortSpec(id=column_id, desc=False)
    elif not existing.desc:
        next_spec = SortSpec(id=column_id, desc=True)
    else:
        next_spec = None

    if not multi:
        return _ok(state, sorting=[next_spec] if next_spec else [])

    if existing is None:
        return _ok(state, sorting=[*state.sorting, next_spec])
    if next_spec is None:
        return _ok(state, sorting=[s for s in state.sorting if s.id != column_id])
    return _ok(state, sorting=[next_spec if s.id == column_id else s for s in state.sorting])


def _handle_sorting_clear(state: GridState, payload: dict) -> ReduceResult:
    return _ok(state, sorting=[])


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def _without_filter(state: GridState, column_id: str) -> list[ColumnFilter]:
    return [f for f in state.column_filters if f.id != column_id]


def _handle_filter_set(state: GridState, payload: dict) -> ReduceResult:
    """
    None or "" removes the column's filter. Otherwise the value of an
    existing filter is replaced (its operator kept), or a `contains`
    filter is added.
    """
    column_id = payload["column_id"]
    value = payload.get("value")

    if state.column(column_id) is None:
        return _unknown_column(state, column_id)

    if value is None or value == "":
        return _ok(state, column_filters=_without_filter(state, column_id))

    existing = next((f for f in state.column_filters if f.id == column_id), None)
    if existing is not None:
        updated = existing.model_copy(update={"value": value})
        filters = [updated if f.id == column_id else f for f in state.column_filters]
    else:
        filters = [
            *state.column_filters,
            ColumnFilter(id=column_id, operator="contains", value=value),
        ]
    return _ok(state, column_filters=filters)


def _handle_filter_set_with_operator(state: GridState, payload: dict) -> ReduceResult:
    column_filter = ColumnFilter.model_validate(payload["filter"])
    if state.column(column_filter.id) is None:
        return _unknown_column(state, column_filter.id)

    if any(f.id == column_filter.id for f in state.column_filters):
        filters = [column_filter if f.id == column_filter.id else f for f in state.column_filters]
    else:
        filters = [*state.column_filters, column_filter]
    return _ok(state, column_filters=filters)


def _handle_filter_remove(state: GridState, payload: dict) -> ReduceResult:
    column_id = payload["column_id"]
    if state.column(column_id) is None:
        return _unknown_column(state, column_id)
    return _ok(state, column_filters=_without_filter(state, column_id))


def _handle_filter_set_global(state: GridState, payload: dict) -> ReduceResult:
    value = payload.get("value")
    return _ok(state, global_filter="" if value is None else str(value))


def _handle_filter_clear(state: GridState, payload: dict) -> ReduceResult:
    return _ok(state, column_filters=[], global_filter="")


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


def _handle_page_set_index(state: GridState, payload: dict) -> ReduceResult:
    page_index = int(payload["page_index"])
    return _ok(state, pagination=_clamped_pagination(state, page_index))


def _handle_page_set_size(state: GridState, payload: dict) -> ReduceResult:
    page_size = payload["page_size"]
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        return _reject(state, render_message("E-1003", value=page_size), "E-1003")
    return _ok(state, pagination=PaginationState(page_index=0, page_size=page_size))


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def _selection_disabled(state: GridState) -> ReduceResult:
    return _reject(state, render_message("E-1005"), "E-1005")


def _handle_selection_set(state: GridState, payload: dict) -> ReduceResult:
    if not state.enable_row_selection:
        return _selection_disabled(state)
    selection = selection_ops.normalize_selection(
        payload.get("selection") or {}, state.enable_multi_row_selection
    )
    return _ok(state, row_selection=selection)


def _handle_selection_toggle_row(state: GridState, payload: dict) -> ReduceResult:
    row_id = payload["row_id"]
    if not state.enable_row_selection:
        return _selection_disabled(state)
    if find_row_index(state, row_id) is None:
        return _unknown_row(state, row_id)
    selection = selection_ops.toggle_row(
        state.row_selection, row_id, state.enable_multi_row_selection
    )
    return _ok(state, row_selection=selection)


def _handle_selection_toggle_all(state: GridState, payload: dict) -> ReduceResult:
    if not state.enable_row_selection:
        return _selection_disabled(state)
    if not state.enable_multi_row_selection:
        return _reject(state, "Select all requires multi-row selection")
    visible_ids = row_ids(state, visible_rows(state))
    return _ok(state, row_selection=selection_ops.toggle_all(state.row_selection, visible_ids))


def _handle_selection_clear(state: GridState, payload: dict) -> ReduceResult:
    return _ok(state, row_selection={})


# ---------------------------------------------------------------------------
# Column sizing
# ---------------------------------------------------------------------------


def _handle_sizing_set(state: GridState, payload: dict) -> ReduceResult:
    column_id = payload["column_id"]
    size = float(payload["size"])
    column = state.column(column_id)
    if column is None:
        return _unknown_column(state, column_id)
    return _ok(state, column_sizing=sizing_ops.set_size(state.column_sizing, column, size))


def _handle_sizing_reset(state: GridState, payload: dict) -> ReduceResult:
    column_id = payload["column_id"]
    column = state.column(column_id)
    if column is None:
        return _unknown_column(state, column_id)
    return _ok(state, column_sizing=sizing_ops.reset_size(state.column_sizing, column))


def _handle_sizing_set_resizing(state: GridState, payload: dict) -> ReduceResult:
    column_id = payload.get("column_id")
    if column_id is not None and state.column(column_id) is None:
        return _unknown_column(state, column_id)
    return _ok(state, resizing_column_id=column_id)


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------


def _handle_data_set(state: GridState, payload: dict) -> ReduceResult:
    return _ok(state, data=list(payload.get("data") or []))


def _handle_data_update_row(state: GridState, payload: dict) -> ReduceResult:
    row_id = payload["row_id"]
    updates = dict(payload.get("updates") or {})
    index = find_row_index(state, row_id)
    if index is None:
        return _unknown_row(state, row_id)
    merged = _merge_row(state.data[index], updates)
    return _ok(state, data=_replace_row(state, index, merged))


def _handle_data_set_cell(state: GridState, payload: dict) -> ReduceResult:
    """Write through the column's accessor key; computed columns are read-only."""
    row_id = payload["row_id"]
    column_id = payload["column_id"]

    column = state.column(column_id)
    if column is None:
        return _unknown_column(state, column_id)
    if not column.accessor_key:
        return _reject(state, render_message("E-1006", column=column_id), "E-1006", column_id)

    index = find_row_index(state, row_id)
    if index is None:
        return _unknown_row(state, row_id)

    merged = _merge_row(state.data[index], {column.accessor_key: payload.get("value")})
    return _ok(state, data=_replace_row(state, index, merged))


def _handle_data_add_row(state: GridState, payload: dict) -> ReduceResult:
    return _ok(state, data=[*state.data, payload["row"]])


def _handle_data_remove_row(state: GridState, payload: dict) -> ReduceResult:
    row_id = payload["row_id"]
    index = find_row_index(state, row_id)
    if index is None:
        return _unknown_row(state, row_id)
    data = [row for i, row in enumerate(state.data) if i != index]
    selection = {k: v for k, v in state.row_selection.items() if k != row_id}
    return _ok(state, data=data, row_selection=selection)


# ---------------------------------------------------------------------------
# Columns and options
# ---------------------------------------------------------------------------


def _handle_columns_set(state: GridState, payload: dict) -> ReduceResult:
    """Replace columns; sizes of surviving columns are kept, new ones seeded."""
    columns = [ColumnDef.model_validate(c) for c in payload.get("columns") or []]
    sizing = sizing_ops.initial_sizing(columns)
    for col in columns:
        if col.id in state.column_sizing:
            sizing[col.id] = state.column_sizing[col.id]
    resizing = state.resizing_column_id
    if resizing is not None and resizing not in {col.id for col in columns}:
        resizing = None
    return _ok(state, columns=columns, column_sizing=sizing, resizing_column_id=resizing)


def _handle_options_set(state: GridState, payload: dict) -> ReduceResult:
    """Replace all feature flags; flags absent from the payload revert to defaults."""
    flags = FeatureFlags.model_validate(payload)
    selection = selection_ops.normalize_selection(
        state.row_selection, flags.enable_multi_row_selection
    )
    return _ok(state, row_selection=selection, **flags.model_dump())


_HANDLERS: dict[str, Callable[[GridState, dict], ReduceResult]] = {
    "sorting.set": _handle_sorting_set,
    "sorting.toggle": _handle_sorting_toggle,
    "sorting.clear": _handle_sorting_clear,
    "filter.set": _handle_filter_set,
    "filter.set_with_operator": _handle_filter_set_with_operator,
    "filter.remove": _handle_filter_remove,
    "filter.set_global": _handle_filter_set_global,
    "filter.clear": _handle_filter_clear,
    "page.set_index": _handle_page_set_index,
    "page.set_size": _handle_page_set_size,
    "selection.set": _handle_selection_set,
    "selection.toggle_row": _handle_selection_toggle_row,
    "selection.toggle_all": _handle_selection_toggle_all,
    "selection.clear": _handle_selection_clear,
    "sizing.set": _handle_sizing_set,
    "sizing.reset": _handle_sizing_reset,
    "sizing.set_resizing": _handle_sizing_set_resizing,
    "data.set": _handle_data_set,
    "data.update_row": _handle_data_update_row,
    "data.set_cell": _handle_data_set_cell,
    "data.add_row": _handle_data_add_row,
    "data.remove_row": _handle_data_remove_row,
    "columns.set": _handle_columns_set,
    "options.set": _handle_options_set,
}
