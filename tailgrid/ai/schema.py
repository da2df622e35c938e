"""Column schema projection sent to AI providers.

Only the compact {id, name, type, examples, description} view of each column
leaves the process; row data contributes at most a few example values.
"""

from typing import Any, Iterable, Sequence

from pydantic import BaseModel, Field

from tailgrid.engine.accessor import get_row_value, is_empty, stringify
from tailgrid.engine.models import ColumnDef, DataType

MAX_EXAMPLES = 3


class ColumnSchema(BaseModel):
    """Provider-facing description of one column.

    Attributes:
        id: Column id the provider must use in filters and sorting.
        name: Column header.
        type: Column data type.
        examples: A few distinct sample values as strings.
        description: Free-text description; defaults to the header.
    """

    id: str = Field(..., description="Column id")
    name: str = Field(..., description="Column header")
    type: DataType = Field(default=DataType.STRING, description="Column data type")
    examples: list[str] = Field(default_factory=list, description="Sample values")
    description: str | None = Field(default=None, description="Column description")


def _collect_examples(column: ColumnDef, rows: Iterable[Any], limit: int) -> list[str]:
    """First `limit` distinct, non-empty values of `column` in row order."""
    examples: list[str] = []
    for row in rows:
        value = get_row_value(row, column)
        if is_empty(value):
            continue
        text = stringify(value)
        if text not in examples:
            examples.append(text)
            if len(examples) >= limit:
                break
    return examples


def columns_to_schema(
    columns: Sequence[ColumnDef],
    rows: Sequence[Any] | None = None,
    max_examples: int = MAX_EXAMPLES,
) -> list[ColumnSchema]:
    """Project column definitions to provider schema entries.

    Args:
        columns: Grid column definitions.
        rows: Optional rows to draw example values from.
        max_examples: Cap on examples per column.

    Returns:
        One ColumnSchema per column, in column order.
    """
    return [
        ColumnSchema(
            id=col.id,
            name=col.header,
            type=col.data_type,
            examples=_collect_examples(col, rows, max_examples) if rows else [],
            description=col.description or col.header,
        )
        for col in columns
    ]
