"""Row value resolution and value coercion helpers.

Every processor reads cell values through get_row_value(). The coercion
helpers define how loosely-typed cell values are compared:

- to_number() never raises; values that cannot be read as a number become
  NaN, and every ordering comparison against NaN is False.
- to_datetime() never raises; unparseable values become None.
- stringify() is the string form used by substring and equality matching
  (booleans render as "true"/"false", integral floats drop the ".0").
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from tailgrid.engine.models.column import ColumnDef

# Fallback formats tried after ISO 8601 parsing fails
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)

_EPOCH = datetime(1970, 1, 1)


def resolve_key_path(row: Any, key: str) -> Any:
    """Read `key` from a row, following dotted paths into nested values.

    A literal key containing dots wins over path traversal when present.
    Mappings are read by key, other objects by attribute. Missing segments
    resolve to None.
    """
    if isinstance(row, Mapping) and key in row:
        return row[key]

    current = row
    for segment in key.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(segment)
        else:
            current = getattr(current, segment, None)
    return current


def get_row_value(row: Any, column: ColumnDef) -> Any:
    """Resolve the value of `column` for `row`.

    The accessor function takes precedence over the accessor key. A column
    with neither resolves to None.
    """
    if column.accessor_fn is not None:
        return column.accessor_fn(row)
    if column.accessor_key:
        return resolve_key_path(row, column.accessor_key)
    return None


def is_empty(value: Any) -> bool:
    """None, empty string, or empty list/tuple."""
    if value is None or value == "":
        return True
    return isinstance(value, (list, tuple)) and len(value) == 0


def stringify(value: Any) -> str:
    """String form of a cell value for text matching."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    return str(value)


def to_number(value: Any) -> float:
    """Coerce a value to float; NaN when it has no numeric reading."""
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, (datetime, date)):
        dt = to_datetime(value)
        return _epoch_millis(dt) if dt is not None else math.nan
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def to_datetime(value: Any) -> datetime | None:
    """Coerce a value to a naive UTC datetime; None when unparseable.

    Accepts datetime, date, ISO 8601 strings (with or without offset), a few
    common display formats, and numbers as epoch milliseconds.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float, Decimal)):
        millis = float(value)
        if math.isnan(millis) or math.isinf(millis):
            return None
        try:
            return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return _naive_utc(datetime.fromisoformat(text))
        except ValueError:
            pass
        for fmt in _DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
    return None


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _epoch_millis(value: datetime) -> float:
    return (value - _EPOCH).total_seconds() * 1000
