"""Natural-language query orchestration.

AIQueryPipeline builds the prompt for a grid's columns, invokes the
provider, and parses the reply. run() always resolves to an AIQueryResult:
provider exceptions become zero-confidence results carrying the error text
and a registry code.

Concurrent run() calls are allowed. Every call gets its own prompt and
result; `last_result` only moves forward to the result of the most recently
issued query, so a slow earlier reply never overwrites a newer one.

Example:
    pipeline = AIQueryPipeline(provider, columns, rows=rows)
    result = await pipeline.run("customers in CA sorted by revenue")
    if pipeline.apply(engine, result):
        print(engine.get_row_model())
"""

import logging
from datetime import datetime, timezone
from typing import Any, Sequence

from tailgrid.ai.config import get_confidence_threshold
from tailgrid.ai.models import AIQueryResult, QueryHistoryEntry, QueryStatus
from tailgrid.ai.prompt_builder import build_prompt_context
from tailgrid.ai.providers import ProviderAdapter
from tailgrid.ai.response_parser import parse_ai_response
from tailgrid.ai.schema import ColumnSchema, columns_to_schema
from tailgrid.engine import GridEngine
from tailgrid.engine.models import ColumnDef, unique_sorting
from tailgrid.errors.domain import ProviderError
from tailgrid.errors.registry import render_message
from tailgrid.utils.redaction import sanitize_error_message

logger = logging.getLogger(__name__)


class AIQueryPipeline:
    """Runs natural-language queries against one grid's column schema.

    Attributes:
        provider: Backend used for every query.
        schema: Column schema sent with every prompt.
        context: Optional free text appended to the system prompt.
        status: IDLE, or REQUESTING while any query is in flight.
        last_status: SUCCEEDED or FAILED for `last_result`, None before
            the first query settles.
        last_result: Result of the most recently issued query that settled.
        history: Every settled non-empty query, in settle order.
    """

    def __init__(
        self,
        provider: ProviderAdapter,
        columns: Sequence[ColumnDef],
        rows: Sequence[Any] | None = None,
        context: str | None = None,
    ) -> None:
        self.provider = provider
        self.schema: list[ColumnSchema] = columns_to_schema(columns, rows)
        self.context = context
        self.status = QueryStatus.IDLE
        self.last_status: QueryStatus | None = None
        self.last_result: AIQueryResult | None = None
        self.history: list[QueryHistoryEntry] = []
        self._issued = 0
        self._latest_settled = 0
        self._in_flight = 0

    async def run(self, query: str) -> AIQueryResult:
        """Translate `query` into filters and sorting. Never raises."""
        self._issued += 1
        sequence = self._issued

        if not query or not query.strip():
            result = AIQueryResult.failed(query or "", render_message("E-2004"), "E-2004")
            self._settle(sequence, result)
            return result

        self._in_flight += 1
        self.status = QueryStatus.REQUESTING
        logger.info("AI query issued via %s: %r", self.provider.kind, query)

        try:
            system, user = build_prompt_context(query, self.schema, self.context)
            raw = await self.provider.invoke(system, user)
            result = parse_ai_response(raw, query)
        except ProviderError as e:
            logger.warning("AI provider failed (%s): %s", e.code, e)
            result = AIQueryResult.failed(query, str(e), e.code)
        except Exception as e:
            logger.exception("Unexpected error running AI query")
            detail = sanitize_error_message(str(e)) or type(e).__name__
            result = AIQueryResult.failed(query, render_message("E-4003", detail=detail), "E-4003")
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self.status = QueryStatus.IDLE

        self.history.append(
            QueryHistoryEntry(query=query, result=result, timestamp=datetime.now(timezone.utc))
        )
        self._settle(sequence, result)
        logger.info(
            "AI query settled: confidence=%.2f filters=%d sorting=%d error=%s",
            result.confidence,
            len(result.filters),
            len(result.sorting),
            result.error_code,
        )
        return result

    def _settle(self, sequence: int, result: AIQueryResult) -> None:
        if sequence < self._latest_settled:
            logger.debug("Discarding stale AI result for query #%d", sequence)
            return
        self._latest_settled = sequence
        self.last_result = result
        self.last_status = QueryStatus.SUCCEEDED if result.succeeded else QueryStatus.FAILED

    def clear_result(self) -> None:
        self.last_result = None
        self.last_status = None

    def clear_history(self) -> None:
        self.history = []

    def apply(
        self,
        engine: GridEngine,
        result: AIQueryResult,
        min_confidence: float | None = None,
        replace_filters: bool = False,
    ) -> bool:
        """Apply a result's filters and sorting to `engine`.

        Args:
            engine: Grid to update.
            result: Result from run().
            min_confidence: Results below this confidence are not applied.
                Defaults to TAILGRID_AI_CONFIDENCE_THRESHOLD (0.7 when unset).
            replace_filters: Remove the grid's existing column filters first.

        Returns:
            True if the result was applied.
        """
        if min_confidence is None:
            min_confidence = get_confidence_threshold()
        if not result.succeeded or result.confidence < min_confidence:
            logger.info(
                "Not applying AI result (confidence=%.2f, threshold=%.2f, error=%s)",
                result.confidence,
                min_confidence,
                result.error_code,
            )
            return False

        if replace_filters:
            for existing in engine.get_column_filters():
                engine.remove_column_filter(existing.id)

        for column_filter in result.filters:
            if engine.get_column_by_id(column_filter.id) is None:
                logger.warning("AI result references unknown column %r; skipped", column_filter.id)
                continue
            engine.set_column_filter_with_operator(column_filter)

        if result.sorting:
            known = unique_sorting(
                [s for s in result.sorting if engine.get_column_by_id(s.id) is not None]
            )
            if len(known) != len(result.sorting):
                logger.warning("AI result sorts by unknown or repeated columns; those keys were dropped")
            engine.set_sorting(known)

        return True
