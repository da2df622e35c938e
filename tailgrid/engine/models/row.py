"""Row and cell view-models produced by GridEngine.get_row_model()."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tailgrid.engine.accessor import get_row_value
from tailgrid.engine.models.column import ColumnDef


class GridCell(BaseModel):
    """One cell of a row view. `id` is "<row_id>_<column_id>"."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    row_id: str
    column: ColumnDef
    value: Any = None


class GridRow(BaseModel):
    """A row in the current view with its selection state.

    Attributes:
        id: Row identifier from the grid's row id function.
        index: Position in the current (paginated) view.
        original: The underlying row object, by reference.
        is_selected: Whether the row id is in the selection.
        can_select: Whether row selection is enabled.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    index: int
    original: Any
    is_selected: bool = False
    can_select: bool = False
    columns: list[ColumnDef] = Field(default_factory=list, repr=False)

    def get_value(self, column_id: str) -> Any:
        """Resolve this row's value for a column; None for unknown ids."""
        for col in self.columns:
            if col.id == column_id:
                return get_row_value(self.original, col)
        return None

    def get_visible_cells(self) -> list[GridCell]:
        """Build one cell per column, in column order."""
        return [
            GridCell(
                id=f"{self.id}_{col.id}",
                row_id=self.id,
                column=col,
                value=get_row_value(self.original, col),
            )
            for col in self.columns
        ]
