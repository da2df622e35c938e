"""Secret masking for provider request headers and error text.

HTTP providers log their outgoing headers at DEBUG, and provider error
bodies end up in AIQueryResult.error. Both go through here first so API
keys never reach a log line or a result.
"""

import re
from collections.abc import Mapping

REDACTED = "***REDACTED***"

# Header names whose values are credentials (matched as lowercase substrings)
_SECRET_HEADER_PARTS = ("authorization", "api-key", "api_key", "token", "secret", "cookie")

_SECRET_NAMES = r"api[_-]?key|access[_-]?token|token|secret|password"

_SECRET_TEXT = re.compile(
    r"(?i)"
    r"bearer\s+[A-Za-z0-9._~+/=-]+"
    r'|"(?:' + _SECRET_NAMES + r')"\s*:\s*"[^"]*"'
    r"|\b(?:" + _SECRET_NAMES + r")\s*[=:]\s*[^\s,&\"']+"
    r"|\bsk-[A-Za-z0-9_-]{8,}"
)


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy of `headers` with credential values masked."""
    masked = {}
    for name, value in headers.items():
        lowered = name.lower()
        if any(part in lowered for part in _SECRET_HEADER_PARTS):
            masked[name] = REDACTED
        else:
            masked[name] = value
    return masked


def sanitize_error_message(msg: str | None, max_length: int = 2000) -> str | None:
    """Mask key-like substrings in free text and cap its length.

    Args:
        msg: Provider error text (None passes through).
        max_length: Longest string returned; longer text ends in "...".

    Returns:
        Sanitized text, or None.
    """
    if msg is None:
        return None
    sanitized = _SECRET_TEXT.sub(REDACTED, msg)
    if len(sanitized) > max_length:
        sanitized = sanitized[: max_length - 3] + "..."
    return sanitized
