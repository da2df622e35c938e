"""Multi-key, type-aware row sorting.

Sort keys are evaluated in order; the first key producing a non-zero
comparison decides, with its `desc` flag negating the result. Missing (None)
values always sort after defined values in both directions. Python's sort is
stable, so rows with no deciding key keep their input order.
"""

from __future__ import annotations

import math
import re
import unicodedata
from functools import cmp_to_key
from typing import Any, Sequence

from tailgrid.engine.accessor import get_row_value, stringify, to_datetime, to_number
from tailgrid.engine.models.column import NUMERIC_TYPES, ColumnDef, DataType
from tailgrid.engine.models.filter import SortSpec

_DIGITS = re.compile(r"(\d+)")


def _fold(text: str) -> str:
    """Case- and accent-insensitive form of a string."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def natural_key(value: Any) -> list[Any]:
    """Sort key treating digit runs as numbers ("Row 9" < "Row 10").

    re.split with a capturing group alternates text and digit chunks, so
    even positions are always str and odd positions always int across keys.
    """
    parts = _DIGITS.split(_fold(stringify(value)))
    return [int(part) if i % 2 else part for i, part in enumerate(parts)]


def _sign(number: float) -> int:
    if math.isnan(number):
        return 0
    return (number > 0) - (number < 0)


def compare_values(a: Any, b: Any, data_type: DataType = DataType.STRING) -> int:
    """Compare two defined values for `data_type`. Returns -1, 0 or 1."""
    if data_type in NUMERIC_TYPES:
        return _sign(to_number(a) - to_number(b))

    if data_type == DataType.DATE:
        date_a = to_datetime(a)
        date_b = to_datetime(b)
        if date_a is None or date_b is None:
            return 0
        return (date_a > date_b) - (date_a < date_b)

    if data_type == DataType.BOOLEAN:
        return int(a is True) - int(b is True)

    key_a = natural_key(a)
    key_b = natural_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_rows(
    rows: Sequence[Any],
    sorting: Sequence[SortSpec],
    columns: Sequence[ColumnDef],
) -> list[Any]:
    """Return a new list of `rows` ordered by `sorting`.

    Sort entries naming unknown columns are skipped.
    """
    column_map = {col.id: col for col in columns}
    keys = [(column_map[s.id], s.desc) for s in sorting if s.id in column_map]
    if not keys:
        return list(rows)

    decorated = [
        ([get_row_value(row, col) for col, _ in keys], row) for row in rows
    ]

    def _compare(left: tuple[list[Any], Any], right: tuple[list[Any], Any]) -> int:
        for (col, desc), value_a, value_b in zip(keys, left[0], right[0]):
            if value_a is None and value_b is None:
                continue
            # Nulls last regardless of direction
            if value_a is None:
                return 1
            if value_b is None:
                return -1
            result = compare_values(value_a, value_b, col.data_type)
            if result:
                return -result if desc else result
        return 0

    decorated.sort(key=cmp_to_key(_compare))
    return [row for _, row in decorated]
