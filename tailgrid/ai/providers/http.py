"""Shared JSON-over-HTTP transport for HTTP-based providers.

Error responses raise ProviderError, never httpx exceptions, so the
pipeline can map every transport failure to a registry code.
"""

import logging
from typing import Any

import httpx

from tailgrid.errors.domain import ProviderError
from tailgrid.errors.registry import render_message
from tailgrid.utils.redaction import redact_headers, sanitize_error_message

logger = logging.getLogger(__name__)


async def post_json(
    url: str,
    body: Any,
    *,
    provider: str,
    headers: dict[str, str] | None = None,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """POST `body` as JSON and return the decoded JSON response.

    Args:
        url: Endpoint URL.
        body: JSON-serializable request body.
        provider: Display name used in error messages ("OpenAI", ...).
        headers: Request headers, including auth.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests use httpx.MockTransport).

    Returns:
        Decoded JSON payload.

    Raises:
        ProviderError: On timeout (E-3002), connection failure (E-3003),
            non-2xx status (E-3001) or a non-JSON body (E-3004).
    """
    request_headers = {"Content-Type": "application/json", **(headers or {})}
    logger.debug(
        "POST %s (%s) headers=%s",
        url,
        provider,
        redact_headers(request_headers),
    )

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.post(url, json=body, headers=request_headers)
    except httpx.TimeoutException as e:
        raise ProviderError(
            render_message("E-3002", provider=provider, timeout=timeout),
            provider=provider,
            code="E-3002",
        ) from e
    except httpx.RequestError as e:
        detail = sanitize_error_message(str(e) or type(e).__name__)
        raise ProviderError(
            render_message("E-3003", provider=provider, detail=detail),
            provider=provider,
            code="E-3003",
        ) from e

    if not resp.is_success:
        text = sanitize_error_message(resp.text) or ""
        raise ProviderError(
            render_message("E-3001", provider=provider, status=resp.status_code, body=text),
            provider=provider,
            code="E-3001",
            status_code=resp.status_code,
            body=text,
        )

    try:
        return resp.json()
    except ValueError as e:
        detail = sanitize_error_message(resp.text[:200]) or ""
        raise ProviderError(
            render_message("E-3004", provider=provider, detail=detail),
            provider=provider,
            code="E-3004",
            status_code=resp.status_code,
        ) from e
