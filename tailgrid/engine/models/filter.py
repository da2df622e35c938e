"""Filter and sort vocabulary shared by the grid engine and the AI pipeline.

The operator catalogue is exhaustive: a ColumnFilter cannot be constructed
with an operator outside FilterOperator, so an unrecognized operator is
rejected when the filter is built rather than silently matching every row.
Field names (`id`, `operator`, `value`, `desc`) match the JSON contract the
AI provider is asked to produce.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FilterOperator(str, Enum):
    """Allowed column filter operators. VALUE is the wire name."""

    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    BETWEEN = "between"
    IN_LIST = "inList"
    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"


# Human-readable descriptions, in catalogue order, for prompt rendering.
OPERATOR_DESCRIPTIONS: dict[FilterOperator, str] = {
    FilterOperator.EQUALS: "Exact match",
    FilterOperator.NOT_EQUALS: "Not equal",
    FilterOperator.CONTAINS: "Contains substring (strings only)",
    FilterOperator.NOT_CONTAINS: "Does not contain (strings only)",
    FilterOperator.STARTS_WITH: "Starts with (strings only)",
    FilterOperator.ENDS_WITH: "Ends with (strings only)",
    FilterOperator.GT: "Greater than (numbers/dates)",
    FilterOperator.GTE: "Greater than or equal (numbers/dates)",
    FilterOperator.LT: "Less than (numbers/dates)",
    FilterOperator.LTE: "Less than or equal (numbers/dates)",
    FilterOperator.BETWEEN: "Between two values, inclusive (numbers/dates)",
    FilterOperator.IN_LIST: "Value in list",
    FilterOperator.IS_EMPTY: "Value is empty/null",
    FilterOperator.IS_NOT_EMPTY: "Value is not empty/null",
}


class ColumnFilter(BaseModel):
    """A single (column, operator, value) predicate.

    Attributes:
        id: Column id the filter applies to.
        operator: One of the 14 FilterOperator members.
        value: Operand. A 2-element list for `between`, a list for `inList`,
            ignored by `isEmpty`/`isNotEmpty`.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., strict=True, description="Column id")
    operator: FilterOperator = Field(..., description="Filter operator")
    value: Any = Field(default=None, description="Filter operand")


class SortSpec(BaseModel):
    """One entry of a sorting state; list position is tie-break priority."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., strict=True, description="Column id")
    desc: bool = Field(default=False, strict=True, description="Sort descending")


SortingState = list[SortSpec]


def unique_sorting(sorting: list[SortSpec]) -> list[SortSpec]:
    """Drop repeated column ids; the first entry for a column wins."""
    seen: set[str] = set()
    result = []
    for spec in sorting:
        if spec.id not in seen:
            seen.add(spec.id)
            result.append(spec)
    return result
