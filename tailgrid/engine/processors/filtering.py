"""Column filters and the global free-text filter.

Column filters combine with AND: a row is kept only when every active filter
matches. The global filter combines columns with OR: a row is kept when any
filterable column's string form contains the term.

Relational operators on columns that are neither numeric nor date coerce
both sides with to_number(). Non-numeric text becomes NaN and the
comparison is False; this never raises.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from tailgrid.engine.accessor import (
    get_row_value,
    is_empty,
    stringify,
    to_datetime,
    to_number,
)
from tailgrid.engine.models.column import NUMERIC_TYPES, ColumnDef, DataType
from tailgrid.engine.models.filter import ColumnFilter, FilterOperator

logger = logging.getLogger(__name__)


def _same_day(value: Any, target: Any) -> bool:
    value_dt = to_datetime(value)
    target_dt = to_datetime(target)
    if value_dt is None or target_dt is None:
        return False
    return value_dt.date() == target_dt.date()


def _equals(value: Any, target: Any, data_type: DataType) -> bool:
    if data_type in NUMERIC_TYPES:
        return to_number(value) == to_number(target)
    if data_type == DataType.BOOLEAN:
        return isinstance(target, bool) and value is target
    if data_type == DataType.DATE:
        return _same_day(value, target)
    return stringify(value).lower() == stringify(target).lower()


def _ordered(
    value: Any,
    target: Any,
    data_type: DataType,
    compare: Callable[[Any, Any], bool],
) -> bool:
    """Apply `compare` on dates for date columns, numbers otherwise."""
    if data_type == DataType.DATE:
        value_dt = to_datetime(value)
        target_dt = to_datetime(target)
        if value_dt is None or target_dt is None:
            return False
        return compare(value_dt, target_dt)
    return compare(to_number(value), to_number(target))


def _between(value: Any, bounds: Any, data_type: DataType) -> bool:
    if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
        return False
    low, high = bounds
    return _ordered(value, low, data_type, lambda a, b: a >= b) and _ordered(
        value, high, data_type, lambda a, b: a <= b
    )


def _in_list(value: Any, options: Any) -> bool:
    if not isinstance(options, (list, tuple, set, frozenset)):
        return False
    needle = stringify(value).lower()
    return any(stringify(item).lower() == needle for item in options)


def matches_filter(value: Any, column_filter: ColumnFilter, data_type: DataType) -> bool:
    """Evaluate one filter against one resolved cell value."""
    operator = column_filter.operator
    target = column_filter.value

    if operator == FilterOperator.IS_EMPTY:
        return is_empty(value)
    if operator == FilterOperator.IS_NOT_EMPTY:
        return not is_empty(value)

    # Every other operator rejects missing values
    if value is None:
        return False

    text = stringify(value).lower()
    needle = stringify(target).lower()

    if operator == FilterOperator.EQUALS:
        return _equals(value, target, data_type)
    if operator == FilterOperator.NOT_EQUALS:
        return not _equals(value, target, data_type)
    if operator == FilterOperator.CONTAINS:
        return needle in text
    if operator == FilterOperator.NOT_CONTAINS:
        return needle not in text
    if operator == FilterOperator.STARTS_WITH:
        return text.startswith(needle)
    if operator == FilterOperator.ENDS_WITH:
        return text.endswith(needle)
    if operator == FilterOperator.GT:
        return _ordered(value, target, data_type, lambda a, b: a > b)
    if operator == FilterOperator.GTE:
        return _ordered(value, target, data_type, lambda a, b: a >= b)
    if operator == FilterOperator.LT:
        return _ordered(value, target, data_type, lambda a, b: a < b)
    if operator == FilterOperator.LTE:
        return _ordered(value, target, data_type, lambda a, b: a <= b)
    if operator == FilterOperator.BETWEEN:
        return _between(value, target, data_type)
    if operator == FilterOperator.IN_LIST:
        return _in_list(value, target)

    logger.warning("Unhandled filter operator %r treated as match", operator)
    return True


def filter_rows(
    rows: Sequence[Any],
    column_filters: Sequence[ColumnFilter],
    columns: Sequence[ColumnDef],
) -> list[Any]:
    """Keep rows matching all column filters, preserving order.

    Filters naming a column that is not in `columns` are skipped.
    """
    if not column_filters:
        return list(rows)

    column_map = {col.id: col for col in columns}
    active = [(column_map[f.id], f) for f in column_filters if f.id in column_map]
    if not active:
        return list(rows)

    return [
        row
        for row in rows
        if all(
            matches_filter(get_row_value(row, col), f, col.data_type)
            for col, f in active
        )
    ]


def global_filter_rows(
    rows: Sequence[Any],
    term: str,
    columns: Sequence[ColumnDef],
) -> list[Any]:
    """Keep rows where any filterable column contains `term` (case-insensitive).

    Blank terms keep every row. Columns with enable_filtering=False are
    not searched.
    """
    if not term or not term.strip():
        return list(rows)

    needle = term.strip().lower()
    searchable = [col for col in columns if col.enable_filtering is not False]

    def _row_matches(row: Any) -> bool:
        for col in searchable:
            value = get_row_value(row, col)
            if value is not None and needle in stringify(value).lower():
                return True
        return False

    return [row for row in rows if _row_matches(row)]
