"""Shared utilities."""

from tailgrid.utils.redaction import redact_headers, sanitize_error_message

__all__ = ["redact_headers", "sanitize_error_message"]
