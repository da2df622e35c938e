"""Column definition models for the grid engine.

A ColumnDef describes how to read one value from a row (accessor key or
accessor function), how that value is typed for sorting and filtering, and
the sizing bounds the column accepts. GridColumn is the read-only view-model
the engine hands to consumers together with current sort and sizing state.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_COLUMN_WIDTH = 150
DEFAULT_MIN_WIDTH = 50
DEFAULT_MAX_WIDTH = 500


class DataType(str, Enum):
    """Value types understood by the sort and filter processors."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    CURRENCY = "currency"


NUMERIC_TYPES = frozenset({DataType.NUMBER, DataType.CURRENCY})


class ColumnDef(BaseModel):
    """Declarative column definition.

    Attributes:
        id: Unique column identifier.
        header: Human-readable column label.
        accessor_key: Key (or dotted key path) read from each row.
        accessor_fn: Custom function computing the value from a row.
            Takes precedence over accessor_key when both are set.
        data_type: Value type used for type-aware sort/filter.
        enable_sorting: Per-column sorting override (None inherits the grid flag).
        enable_filtering: Per-column filtering override. False excludes the
            column from the global filter.
        width: Declared width in pixels.
        min_width: Lower sizing bound (defaults to 50).
        max_width: Upper sizing bound (defaults to 500).
        enable_resizing: Whether the column may be resized.
        description: Optional text sent to the AI provider instead of the header.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(..., description="Unique column identifier")
    header: str = Field(..., description="Column header label")
    accessor_key: str | None = Field(default=None, description="Row key or dotted path")
    accessor_fn: Callable[[Any], Any] | None = Field(
        default=None, description="Custom accessor function"
    )
    data_type: DataType = Field(default=DataType.STRING, description="Column data type")
    enable_sorting: bool | None = None
    enable_filtering: bool | None = None
    width: float | None = Field(default=None, gt=0)
    min_width: float | None = Field(default=None, ge=0)
    max_width: float | None = Field(default=None, gt=0)
    enable_resizing: bool | None = None
    description: str | None = None

    @property
    def size_bounds(self) -> tuple[float, float]:
        """Return the (min, max) pixel bounds for this column."""
        lower = self.min_width if self.min_width is not None else DEFAULT_MIN_WIDTH
        upper = self.max_width if self.max_width is not None else DEFAULT_MAX_WIDTH
        return lower, upper

    @property
    def default_size(self) -> float:
        """Declared width, or the 150px default."""
        return self.width if self.width is not None else DEFAULT_COLUMN_WIDTH


class GridColumn(BaseModel):
    """Column view-model combining a definition with current grid state."""

    model_config = ConfigDict(frozen=True)

    id: str
    column_def: ColumnDef
    can_sort: bool
    is_sorted: Literal[False, "asc", "desc"] = False
    size: float
    is_resizing: bool = False
