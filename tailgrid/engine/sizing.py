"""Column width bookkeeping with clamping to declared bounds."""

from __future__ import annotations

from typing import Iterable, Mapping

from tailgrid.engine.models.column import ColumnDef


def clamp_size(column: ColumnDef, size: float) -> float:
    """Clamp `size` into the column's [min_width ?? 50, max_width ?? 500]."""
    lower, upper = column.size_bounds
    return max(lower, min(upper, size))


def initial_sizing(columns: Iterable[ColumnDef]) -> dict[str, float]:
    """Seed sizing from columns that declare a width."""
    return {col.id: col.width for col in columns if col.width is not None}


def set_size(sizing: Mapping[str, float], column: ColumnDef, size: float) -> dict[str, float]:
    """Store a clamped width for `column`."""
    return {**sizing, column.id: clamp_size(column, size)}


def reset_size(sizing: Mapping[str, float], column: ColumnDef) -> dict[str, float]:
    """Restore the declared width, or the 150px default."""
    return {**sizing, column.id: column.default_size}


def get_size(sizing: Mapping[str, float], column: ColumnDef) -> float:
    """Current width: stored size, else declared width, else 150."""
    return sizing.get(column.id, column.default_size)
