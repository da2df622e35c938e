"""Models for the natural-language query pipeline.

AIOutput is the validation schema for the JSON object a provider must
return. AIQueryResult is what the pipeline hands back to callers: either the
validated filters/sorting with the provider's confidence, or an empty,
zero-confidence result carrying an error message and registry code.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tailgrid.engine.models import ColumnFilter, FilterOperator, SortSpec, unique_sorting


class AIOutput(BaseModel):
    """Structured output expected from a provider.

    Attributes:
        filters: Column filters, each with an operator from the 14-value catalogue.
        sorting: Sort keys in priority order.
        confidence: Provider's self-reported certainty in [0, 1].
    """

    filters: list[ColumnFilter] = Field(..., description="Filters to apply")
    sorting: list[SortSpec] = Field(..., description="Sort keys to apply")
    confidence: float = Field(
        ..., ge=0, le=1, strict=True, description="Certainty of the interpretation"
    )

    @field_validator("sorting")
    @classmethod
    def _first_key_per_column(cls, sorting: list[SortSpec]) -> list[SortSpec]:
        return unique_sorting(sorting)


# JSON schema sent to providers that support constrained output (tool input
# schema for Anthropic). Mirrors AIOutput.
AI_OUTPUT_JSON_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "filters": {
            "type": "array",
            "description": "Column filters to apply",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Column id"},
                    "operator": {
                        "type": "string",
                        "enum": [op.value for op in FilterOperator],
                    },
                    "value": {"description": "Filter operand"},
                },
                "required": ["id", "operator"],
            },
        },
        "sorting": {
            "type": "array",
            "description": "Sort keys in priority order",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Column id"},
                    "desc": {"type": "boolean"},
                },
                "required": ["id", "desc"],
            },
        },
        "confidence": {
            "type": "number",
            "minimum": 0,
            "maximum": 1,
            "description": "How certain the interpretation is (0-1)",
        },
    },
    "required": ["filters", "sorting", "confidence"],
}


class AIQueryResult(BaseModel):
    """Outcome of one natural-language query.

    Attributes:
        filters: Validated filters; empty on failure.
        sorting: Validated sort keys; empty on failure.
        query: The query text as issued.
        confidence: Provider confidence, forced to 0 on failure.
        error: Failure message, None on success.
        error_code: Registry code (E-2xxx/E-3xxx/E-4xxx) for failures.
        raw_response: Provider text, kept for diagnosis when one was received.
    """

    model_config = ConfigDict(frozen=True)

    filters: list[ColumnFilter] = Field(default_factory=list)
    sorting: list[SortSpec] = Field(default_factory=list)
    query: str
    confidence: float = Field(default=0.0, ge=0, le=1)
    error: str | None = None
    error_code: str | None = None
    raw_response: str | None = None

    @classmethod
    def failed(
        cls,
        query: str,
        error: str,
        error_code: str | None = None,
        raw_response: str | None = None,
    ) -> "AIQueryResult":
        """Zero-confidence result with no filters or sorting."""
        return cls(
            query=query,
            confidence=0.0,
            error=error,
            error_code=error_code,
            raw_response=raw_response,
        )

    @property
    def succeeded(self) -> bool:
        return self.error is None


class QueryStatus(str, Enum):
    """Pipeline states. A query settles into SUCCEEDED or FAILED, then IDLE."""

    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class QueryHistoryEntry(BaseModel):
    """One issued query and its result."""

    model_config = ConfigDict(frozen=True)

    query: str
    result: AIQueryResult
    timestamp: datetime
