"""Parse and validate provider replies into AIQueryResult.

Replies are located heuristically: the first JSON object in the text is
decoded, so prose before or after the object is tolerated. The decoded
object must then validate against AIOutput. Any failure yields a
zero-confidence result with the raw text preserved; parse_ai_response never
raises.
"""

import json
import logging
import re

from pydantic import ValidationError

from tailgrid.ai.models import AIOutput, AIQueryResult
from tailgrid.errors.registry import render_message

logger = logging.getLogger(__name__)

# Greedy first-brace-to-last-brace span, used when the first object does
# not decode on its own
_JSON_SPAN = re.compile(r"\{.*\}", re.DOTALL)

_decoder = json.JSONDecoder()


def _extract_json(response: str) -> object:
    """Decode the first JSON object in `response`.

    Raises:
        LookupError: No '{' in the text.
        json.JSONDecodeError: Nothing decodes from the first '{'.
    """
    start = response.find("{")
    if start < 0:
        raise LookupError("no JSON object")

    try:
        parsed, _ = _decoder.raw_decode(response, start)
        return parsed
    except json.JSONDecodeError:
        match = _JSON_SPAN.search(response)
        if match is None:
            raise
        return json.loads(match.group(0))


def parse_ai_response(response: str, query: str) -> AIQueryResult:
    """Turn raw provider text into an AIQueryResult.

    Args:
        response: Raw text returned by the provider.
        query: The query that produced it.

    Returns:
        Validated result, or a failed result with error and error_code set
        (E-2001 no JSON, E-2002 malformed JSON, E-2003 schema mismatch).
    """
    try:
        parsed = _extract_json(response)
    except LookupError:
        logger.warning("No JSON found in AI response for query %r", query)
        return AIQueryResult.failed(query, render_message("E-2001"), "E-2001", response)
    except json.JSONDecodeError as e:
        logger.warning("Malformed JSON in AI response: %s", e)
        return AIQueryResult.failed(
            query, render_message("E-2002", detail=e.msg), "E-2002", response
        )

    try:
        output = AIOutput.model_validate(parsed)
    except ValidationError as e:
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'response'}: {err['msg']}"
            for err in e.errors()
        )
        logger.warning("AI response failed validation: %s", detail)
        return AIQueryResult.failed(
            query, render_message("E-2003", detail=detail), "E-2003", response
        )

    return AIQueryResult(
        filters=output.filters,
        sorting=output.sorting,
        query=query,
        confidence=output.confidence,
        raw_response=response,
    )
