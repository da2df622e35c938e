"""Prompt construction for natural-language grid queries.

The system prompt grounds the provider in the column schema and the fixed
operator catalogue and demands a JSON-only reply. The user prompt is the
query text exactly as typed.
"""

from datetime import date
from typing import Sequence

from tailgrid.ai.schema import MAX_EXAMPLES, ColumnSchema
from tailgrid.engine.models import OPERATOR_DESCRIPTIONS


def _build_schema_context(columns: Sequence[ColumnSchema]) -> str:
    """One line per column: id, type, name, description and examples."""
    lines = []
    for col in columns:
        line = f'- "{col.id}" ({col.type.value}): {col.name}'
        if col.description and col.description != col.name:
            line += f" - {col.description}"
        if col.examples:
            line += f" (examples: {', '.join(col.examples[:MAX_EXAMPLES])})"
        lines.append(line)
    return "\n".join(lines)


def _build_operator_context() -> str:
    return "\n".join(
        f"- {operator.value}: {description}"
        for operator, description in OPERATOR_DESCRIPTIONS.items()
    )


def build_system_prompt(
    columns: Sequence[ColumnSchema],
    context: str | None = None,
    today: date | None = None,
) -> str:
    """Build the system prompt for a column schema.

    Args:
        columns: Column schema the provider may reference.
        context: Optional free-text context about the data set.
        today: Date used to resolve relative dates; defaults to today.

    Returns:
        System prompt text.
    """
    current_date = (today or date.today()).isoformat()
    context_block = f"\nADDITIONAL CONTEXT:\n{context.strip()}\n" if context and context.strip() else ""

    return f"""You are a data grid query parser. Your job is to convert natural language queries into structured filter and sort operations.

CURRENT CONTEXT:
- Current date: {current_date}
{context_block}
AVAILABLE COLUMNS (USE ONLY THESE):
{_build_schema_context(columns)}

AVAILABLE FILTER OPERATORS:
{_build_operator_context()}

Respond with ONLY valid JSON in this exact format:
{{
  "filters": [
    {{ "id": "column_id", "operator": "equals", "value": "some value" }}
  ],
  "sorting": [
    {{ "id": "column_id", "desc": false }}
  ],
  "confidence": 0.95
}}

RULES:
1. Only use column ids from the AVAILABLE COLUMNS list above
2. Use operators that fit each column's data type
3. For dates, use ISO format (YYYY-MM-DD); resolve relative dates from the current date
4. For numbers, use numeric values (not strings)
5. "between" takes a two-element array [min, max]; "inList" takes an array
6. Confidence is 0-1, based on how certain you are about the interpretation
7. If the query is unclear or cannot be parsed, return empty arrays with low confidence
8. Do not include any explanation, only the JSON object"""


def build_user_prompt(query: str) -> str:
    """The user prompt is the query, verbatim."""
    return query


def build_prompt_context(
    query: str,
    columns: Sequence[ColumnSchema],
    context: str | None = None,
    today: date | None = None,
) -> tuple[str, str]:
    """Return the (system, user) prompt pair for one query."""
    return build_system_prompt(columns, context, today), build_user_prompt(query)
